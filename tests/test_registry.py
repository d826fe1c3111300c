"""
Tests for CommandRegistry — Registration, lookup, search, help and execution

Each test builds its own registry; nothing is shared between cases.
"""

import pytest

from mindmode.commands import COMMAND_MODULES, build_registry, register_all
from mindmode.core.context import CommandContext
from mindmode.core.errors import RegistrationError
from mindmode.core.registry import HELP_FOOTER, CommandRegistry
from mindmode.core.types import ArgSpec, ArgType, Args, Command, CommandResult


def noop(context, args):
    return CommandResult.ok("done")


def make(name, aliases=None, description="", category=None, **kwargs):
    return Command(name=name, description=description, execute=kwargs.pop("execute", noop),
                   aliases=list(aliases or []), category=category, **kwargs)


@pytest.fixture
def empty():
    return CommandRegistry()


class TestRegistration:
    """Names and aliases stay globally unique."""

    def test_register_and_lookup_by_alias(self, empty):
        """Aliases resolve to their command."""
        empty.register(make("center", ["zz"]))
        assert empty.get("zz").name == "center"
        assert "center" in empty
        assert len(empty) == 1

    def test_duplicate_name_raises(self, empty):
        """A second command with the same name is rejected."""
        empty.register(make("center"))
        with pytest.raises(RegistrationError):
            empty.register(make("center"))

    def test_alias_equal_to_existing_name_is_atomic(self, empty):
        """An alias colliding with a name fails and registers nothing."""
        empty.register(make("center"))
        with pytest.raises(RegistrationError):
            empty.register(make("focus", ["zf", "center"]))
        assert empty.get("focus") is None
        assert empty.get("zf") is None
        assert len(empty) == 1

    def test_name_equal_to_existing_alias_raises(self, empty):
        """A name may not shadow another command's alias."""
        empty.register(make("center", ["zz"]))
        with pytest.raises(RegistrationError):
            empty.register(make("zz"))

    def test_alias_equal_to_own_name_raises(self, empty):
        """A command may not alias itself."""
        with pytest.raises(RegistrationError):
            empty.register(make("undo", ["undo"]))
        assert len(empty) == 0

    def test_empty_name_raises(self, empty):
        """Commands need a name."""
        with pytest.raises(RegistrationError):
            empty.register(make(""))

    def test_unregister_removes_aliases(self, empty):
        """Unregistering frees the name and its aliases."""
        empty.register(make("center", ["zz"]))
        assert empty.unregister("center") is True
        assert empty.get("zz") is None
        assert empty.unregister("center") is False
        empty.register(make("other", ["zz"]))
        assert empty.get("zz").name == "other"


class TestCategories:
    """Category grouping."""

    def test_uncategorized_falls_back_to_general(self, empty):
        """Commands without a category land in the default group."""
        empty.register(make("alpha", category="view"))
        empty.register(make("beta"))
        empty.register(make("gamma", category="view"))
        assert [cmd.name for cmd in empty.get_by_category("view")] == ["alpha", "gamma"]
        assert [cmd.name for cmd in empty.get_by_category("general")] == ["beta"]
        assert empty.categories() == ["view", "general"]


class TestBulkLoading:
    """Built-in command loader."""

    def test_all_builtin_commands_register(self):
        """Every built-in command registers without conflicts."""
        registry = CommandRegistry()
        names = register_all(registry)
        assert len(names) == len(registry)
        for name in ("navigate", "toggle", "delete", "cut", "undo", "paste", "help", "close-panels"):
            assert name in registry

    def test_colliding_command_skipped_with_warning(self, capsys):
        """A collision skips that command and continues with the rest."""
        registry = CommandRegistry()
        registry.register(make("blocker", ["za"]))
        names = register_all(registry)
        assert "toggle" not in names
        assert registry.get("za").name == "blocker"
        assert "expand" in names
        assert "Warning: Skipping command 'toggle'" in capsys.readouterr().err

    def test_module_order(self):
        """Modules load in a fixed order."""
        assert COMMAND_MODULES[0] == "navigation"

    def test_fresh_registries_are_independent(self):
        """Two registries never share state."""
        first, second = build_registry(), build_registry()
        first.unregister("center")
        assert "center" in second


class TestSearch:
    """Ranked search."""

    def test_empty_query_returns_everything(self, registry):
        """No query means every command."""
        assert len(registry.search("")) == len(registry)

    def test_name_prefix_beats_description(self, empty):
        """A name prefix outranks a description-only match."""
        empty.register(make("delete", ["dd"], description="Remove the selected node"))
        empty.register(make("center", ["zz"], description="Center node in view"))
        empty.register(make("notes", description="Place notes at center"))
        results = empty.search("ce")
        assert results[0].name == "center"
        assert [cmd.name for cmd in results].index("notes") > 0
        assert all(cmd.name != "delete" for cmd in results)

    def test_scores_are_additive(self, empty):
        """Name and alias matches add up."""
        command = make("toggle", ["toggle-collapse"], description="Toggle fold", category="structure")
        assert CommandRegistry.score(command, "toggle") == 100 + 70 + 30

    def test_ties_keep_registration_order(self, empty):
        """Equal scores keep registration order."""
        empty.register(make("b-cmd", description="x"))
        empty.register(make("a-cmd", description="x"))
        assert [cmd.name for cmd in empty.search("cmd")] == ["b-cmd", "a-cmd"]


class TestHelp:
    """Help text."""

    def test_listing(self, empty):
        """Listing groups by category with a footer."""
        empty.register(make("zeta", ["z"], description="Last", category="nav"))
        empty.register(make("alpha", description="First", category="nav"))
        empty.register(make("misc", description="Other"))
        assert empty.get_help() == "\n".join([
            "Available Commands:",
            "",
            "NAV:",
            "  alpha - First",
            "  zeta (z) - Last",
            "",
            "GENERAL:",
            "  misc - Other",
            "",
            HELP_FOOTER,
        ])

    def test_command_detail(self, empty):
        """Single-command help lists aliases, arguments and examples."""
        empty.register(make(
            "delete", ["dd"], description="Delete the selected node", category="editing",
            args=[
                ArgSpec("nodeId", ArgType.NODE_ID, description="Node to delete"),
                ArgSpec("confirm", ArgType.BOOLEAN, default=False, description="Skip prompt"),
            ],
            examples=["delete", "dd"],
        ))
        assert empty.get_help("dd") == "\n".join([
            "Command: delete",
            "Aliases: dd",
            "Description: Delete the selected node",
            "Category: editing",
            "",
            "Arguments:",
            "  --nodeId (node-id) - Node to delete",
            "  --confirm (boolean) [default: false] - Skip prompt",
            "",
            "Examples:",
            "  delete",
            "  dd",
        ])

    def test_unknown_command(self, empty):
        """Unknown names produce a not-found line."""
        assert empty.get_help("nope") == "Command 'nope' not found"


class TestExecute:
    """Guarded execution."""

    def run(self, map_factory, registry, name, context, args=None):
        return map_factory.run(registry.execute(name, context, args))

    def test_unknown_command(self, map_factory, empty):
        """Unknown names fail without raising."""
        result = self.run(map_factory, empty, "nope", CommandContext())
        assert result.error == "Command 'nope' not found"

    def test_guard_rejects(self, map_factory, empty):
        """A failing guard stops execution."""
        called = []
        empty.register(make("go", guard=lambda ctx, args: False,
                            execute=lambda ctx, args: called.append(True)))
        result = self.run(map_factory, empty, "go", CommandContext())
        assert result.error == "Command guard rejected execution"
        assert called == []
        assert not empty.can_execute("go", CommandContext())

    def test_exception_becomes_failure(self, map_factory, empty):
        """Exceptions inside execute become failed results."""
        def boom(ctx, args):
            raise RuntimeError("kaboom")
        empty.register(make("boom", execute=boom))
        assert self.run(map_factory, empty, "boom", CommandContext()).error == "kaboom"

    def test_async_execute_awaited(self, map_factory, empty):
        """Coroutine commands are awaited."""
        async def later(ctx, args):
            return CommandResult.ok(f"got {args['x']}")
        empty.register(make("later", execute=later))
        result = self.run(map_factory, empty, "later", CommandContext(), Args(x=1))
        assert result.message == "got 1"

    def test_none_result_is_success(self, map_factory, empty):
        """A command returning None counts as success."""
        empty.register(make("quiet", execute=lambda ctx, args: None))
        assert self.run(map_factory, empty, "quiet", CommandContext()).success
