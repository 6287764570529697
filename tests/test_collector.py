"""Tests for the declaration API and file collection."""

import sys

import pytest

from suitest.core import collector
from suitest.core.collector import CollectionContext, SuiteCollector
from suitest.core.hooks import HookRegistry
from suitest.core.models import File, RunMode
from suitest.core.runner import Runner
from suitest.errors import CollectionError


@pytest.fixture
def context():
    """Create and activate a fresh collection context."""
    ctx = CollectionContext()
    with ctx.activate():
        yield ctx


class TestDeclarationApi:
    """Tests for suite(), test() and hook declarations."""

    def test_requires_active_context(self):
        """Test declaring outside of collection raises."""
        with pytest.raises(CollectionError):
            collector.test("orphan", lambda: None)
        with pytest.raises(CollectionError):
            collector.suite("orphan")
        with pytest.raises(CollectionError):
            collector.before_each(lambda task: None)

    def test_top_level_tasks_go_to_default_suite(self, context):
        """Test tasks declared outside a suite attach to the default suite."""
        collector.test("a", lambda: None)
        collector.test.skip("b", lambda: None)

        declarations = context.default_suite.declarations
        assert [(d.name, d.mode) for d in declarations] == [
            ("a", RunMode.RUN),
            ("b", RunMode.SKIP),
        ]

    def test_decorator_forms(self, context):
        """Test named and bare decorator forms return the function."""

        @collector.test("named")
        def named():
            pass

        @collector.test
        def bare():
            pass

        assert callable(named) and callable(bare)
        assert [d.name for d in context.default_suite.declarations] == ["named", "bare"]
        assert context.default_suite.declarations[1].fn is bare

    def test_todo_without_body(self, context):
        """Test todo tasks may be declared without a body."""
        collector.test.todo("later")

        declaration = context.default_suite.declarations[0]
        assert declaration.mode == RunMode.TODO
        assert declaration.fn is None

    def test_body_must_be_callable(self, context):
        """Test a non-callable body is rejected."""
        with pytest.raises(CollectionError):
            collector.test("bad", "not a function")

    def test_suite_registration_and_modes(self, context):
        """Test suites register in order with their declared modes."""
        collector.suite("plain")
        collector.suite.only("focused")
        collector.suite.skip("skipped")
        collector.suite.todo("planned")

        assert [(s.name, s.mode) for s in context.suites] == [
            ("plain", RunMode.RUN),
            ("focused", RunMode.ONLY),
            ("skipped", RunMode.SKIP),
            ("planned", RunMode.TODO),
        ]
        assert context.collectors[0] is context.default_suite

    def test_suite_test_targets_suite(self, context):
        """Test SuiteCollector.test declares on that suite directly."""
        group = collector.suite("group")
        group.test("inside", lambda: None)
        group.test.only("focused", lambda: None)

        assert [d.name for d in group.declarations] == ["inside", "focused"]
        assert group.declarations[1].mode == RunMode.ONLY
        assert context.default_suite.declarations == []

    def test_hooks_register_on_context_registry(self, context):
        """Test hook declarations append to the context's hook registry."""
        first = collector.before_each(lambda task: None)
        second = collector.before_each(lambda task: None)
        collector.after_all(lambda: None)

        assert context.hooks.before_each.callbacks == [first, second]
        assert len(context.hooks.after_all) == 1

    def test_clear_forgets_declarations_but_keeps_hooks(self, context):
        """Test clear() resets suites and tasks."""
        collector.test("a", lambda: None)
        collector.suite("s")
        collector.before_file(lambda f: None)

        context.clear()

        assert context.suites == []
        assert context.default_suite.declarations == []
        assert context.current_suite is context.default_suite
        assert len(context.hooks.before_file) == 1


class TestSuiteCollector:
    """Tests for collecting a suite into a Suite."""

    @pytest.mark.asyncio
    async def test_collect_runs_factory(self):
        """Test the factory's declarations become the suite's tasks."""

        def factory():
            collector.test("one", lambda: None)
            collector.test.todo("two")

        context = CollectionContext()
        file = File(filepath="/tmp/x.test.py")
        with context.activate():
            group = collector.suite("group", factory)
            context.current_suite = group
            suite = await group.collect(file)

        assert suite.name == "group"
        assert suite.file is file
        assert [t.name for t in suite.tasks] == ["one", "two"]
        assert all(t.suite is suite for t in suite.tasks)
        assert suite.tasks[1].mode == RunMode.TODO

    @pytest.mark.asyncio
    async def test_collect_awaits_async_factory(self):
        """Test async factories are awaited."""
        group = SuiteCollector("async")

        async def factory():
            group.test("declared later", lambda: None)

        group(factory)
        suite = await group.collect(File(filepath="/tmp/x.test.py"))

        assert [t.name for t in suite.tasks] == ["declared later"]

    @pytest.mark.asyncio
    async def test_nested_suite_rejected(self):
        """Test declaring a suite inside a suite factory raises."""

        def factory():
            collector.suite("inner")

        context = CollectionContext()
        with context.activate():
            outer = collector.suite("outer", factory)
            context.current_suite = outer

            with pytest.raises(CollectionError, match="nested"):
                await outer.collect(File(filepath="/tmp/x.test.py"))


class TestCollectFiles:
    """Tests for Runner.collect_files."""

    @pytest.mark.asyncio
    async def test_suites_in_declaration_order(self, config, write_test_file):
        """Test the default suite comes first, then declared suites in order."""
        path = write_test_file(
            "a.test.py",
            """
            from suitest import suite, test

            test("top", lambda: None)

            @suite("first")
            def _():
                test("f", lambda: None)

            second = suite("second")
            second.test("s", lambda: None)
            """,
        )

        [file] = await Runner(config).collect_files([str(path)])

        assert file.collected is True
        assert file.error is None
        assert [s.name for s in file.suites] == ["", "first", "second"]
        assert [t.name for t in file.tasks] == ["top", "f", "s"]

    @pytest.mark.asyncio
    async def test_files_do_not_leak_suites(self, config, write_test_file):
        """Test each file only sees its own suites."""
        a = write_test_file("a.test.py", "from suitest import suite\nsuite('from a')\n")
        b = write_test_file("b.test.py", "from suitest import suite\nsuite('from b')\n")

        file_a, file_b = await Runner(config).collect_files([str(a), str(b)])

        assert [s.name for s in file_a.suites] == ["", "from a"]
        assert [s.name for s in file_b.suites] == ["", "from b"]

    @pytest.mark.asyncio
    async def test_collect_error_keeps_partial_suites(self, config, write_test_file):
        """Test a failing factory marks the file uncollected but keeps earlier suites."""
        path = write_test_file(
            "a.test.py",
            """
            from suitest import suite, test

            test("top", lambda: None)

            @suite("broken")
            def _():
                raise ValueError("factory failed")
            """,
        )

        [file] = await Runner(config).collect_files([str(path)])

        assert file.collected is False
        assert isinstance(file.error, ValueError)
        assert [s.name for s in file.suites] == [""]

    @pytest.mark.asyncio
    async def test_syntax_error_is_recorded(self, config, write_test_file):
        """Test a file that does not parse is recorded as a collection error."""
        bad = write_test_file("bad.test.py", "def broken(:\n")
        good = write_test_file("good.test.py", "from suitest import test\ntest('ok', lambda: None)\n")

        bad_file, good_file = await Runner(config).collect_files([str(bad), str(good)])

        assert bad_file.collected is False
        assert isinstance(bad_file.error, SyntaxError)
        assert good_file.collected is True

    @pytest.mark.asyncio
    async def test_hooks_shared_across_files(self, config, write_test_file):
        """Test hooks declared in any file land in the runner's registry."""
        a = write_test_file("a.test.py", "from suitest import before_each\nbefore_each(lambda t: None)\n")
        b = write_test_file("b.test.py", "from suitest import after_each\nafter_each(lambda t: None)\n")
        runner = Runner(config)

        await runner.collect_files([str(a), str(b)])

        assert isinstance(runner.hooks, HookRegistry)
        assert len(runner.hooks.before_each) == 1
        assert len(runner.hooks.after_each) == 1

    @pytest.mark.asyncio
    async def test_sibling_modules_importable(self, config, write_test_file, tmp_path):
        """Test a test file can import a helper next to it, at load and in factories."""
        write_test_file("suitest_sibling_helper.py", "VALUE = 42\n")
        path = write_test_file(
            "a.test.py",
            """
            from suitest import suite, test

            from suitest_sibling_helper import VALUE

            @suite("uses helper")
            def _():
                import suitest_sibling_helper

                test(f"value {VALUE + suitest_sibling_helper.VALUE}", lambda: None)
            """,
        )

        try:
            [file] = await Runner(config).collect_files([str(path)])
        finally:
            sys.modules.pop("suitest_sibling_helper", None)

        assert file.error is None
        assert [t.name for t in file.tasks] == ["value 84"]
        assert str(tmp_path.resolve()) not in sys.path

    @pytest.mark.asyncio
    async def test_loaded_modules_are_released(self, config, write_test_file):
        """Test collected and failed test files are dropped from sys.modules."""
        good = write_test_file("good.test.py", "from suitest import test\ntest('ok', lambda: None)\n")
        bad = write_test_file("bad.test.py", "raise RuntimeError('load failed')\n")

        await Runner(config).collect_files([str(good), str(bad)])

        leaked = [name for name in sys.modules if name.startswith("suitest_file_")]
        assert leaked == []
