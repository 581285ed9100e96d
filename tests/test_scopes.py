"""Tests for scopes."""

from __future__ import annotations

from diprovide import ResolutionContext, Scope, create_mock_registry, create_scope, scoped, transient
from tests.support import CallCounter


class TestScopeStorage:
    def test_create_scope_returns_empty_scope(self) -> None:
        scope = create_scope()

        assert isinstance(scope, Scope)
        assert len(scope) == 0

    def test_set_then_get(self, scope: Scope) -> None:
        get_red = scoped(lambda: "red")
        value = object()

        scope.set(get_red, value)

        assert scope.has(get_red)
        assert get_red in scope
        assert scope.get(get_red) is value

    def test_get_missing_returns_default(self, scope: Scope) -> None:
        get_red = scoped(lambda: "red")

        assert not scope.has(get_red)
        assert scope.get(get_red) is None
        assert scope.get(get_red, "fallback") == "fallback"

    def test_keys_are_provider_identities(self, scope: Scope) -> None:
        """Providers built from the same resolver do not share entries."""

        def resolve() -> str:
            return "red"

        first = scoped(resolve)
        second = scoped(resolve)
        scope.set(first, "first")

        assert scope.has(first)
        assert not scope.has(second)

    def test_set_overwrites_existing_entry(self, scope: Scope) -> None:
        get_red = scoped(lambda: "red")

        scope.set(get_red, "first")
        scope.set(get_red, "second")

        assert scope.get(get_red) == "second"
        assert len(scope) == 1

    def test_discard_failed_removes_matching_entry(self, scope: Scope) -> None:
        get_red = scoped(lambda: "red")
        failed = object()
        scope.set(get_red, failed)

        assert scope.discard_failed(get_red, failed)
        assert not scope.has(get_red)

    def test_discard_failed_keeps_newer_entry(self, scope: Scope) -> None:
        get_red = scoped(lambda: "red")
        scope.set(get_red, "newer")

        assert not scope.discard_failed(get_red, object())
        assert scope.get(get_red) == "newer"

    def test_lock_for_is_per_provider(self, scope: Scope) -> None:
        get_red = scoped(lambda: "red")
        get_blue = scoped(lambda: "blue")

        assert scope.lock_for(get_red) is scope.lock_for(get_red)
        assert scope.lock_for(get_red) is not scope.lock_for(get_blue)
        assert len(scope) == 0

    def test_repr(self, scope: Scope) -> None:
        scope.set(scoped(lambda: "red"), "red")

        assert repr(scope) == "Scope(resolutions=1)"


class TestScopeResolve:
    def test_resolve_binds_provider_to_scope(self, scope: Scope) -> None:
        resolver = CallCounter(object)
        get_thing = scoped(resolver)

        first = scope.resolve(get_thing)
        second = scope.resolve(get_thing)

        assert first is second
        assert scope.get(get_thing) is first
        assert resolver.calls == 1

    def test_resolve_keeps_mocks_of_context(self, scope: Scope) -> None:
        get_red = scoped(lambda: "red")
        mocks = create_mock_registry().register(get_red, transient(lambda: "blue"))

        assert scope.resolve(get_red, ResolutionContext(mocks=mocks)) == "blue"

    def test_resolve_replaces_scope_of_context(self, scope: Scope) -> None:
        get_thing = scoped(object)
        other_scope = create_scope()

        scope.resolve(get_thing, ResolutionContext(scope=other_scope))

        assert scope.has(get_thing)
        assert not other_scope.has(get_thing)


class TestScopedGraphs:
    def test_scope_is_shared_by_whole_graph(self, scoped_context: ResolutionContext) -> None:
        get_session = scoped(object)
        get_users = scoped(lambda context: ("users", get_session(context)))

        users = get_users(scoped_context)

        assert scoped_context.scope is not None
        assert scoped_context.scope.get(get_users) is users
        assert scoped_context.scope.get(get_session) is users[1]

    def test_scoped_dependency_of_transient_is_reused(
        self,
        scoped_context: ResolutionContext,
    ) -> None:
        get_session = scoped(object)
        get_handler = transient(lambda context: {"session": get_session(context)})

        first = get_handler(scoped_context)
        second = get_handler(scoped_context)

        assert first is not second
        assert first["session"] is second["session"]

    def test_scopes_do_not_leak_into_each_other(self) -> None:
        get_session = scoped(object)
        get_handler = transient(lambda context: {"session": get_session(context)})

        request_a = get_handler(ResolutionContext(scope=create_scope()))
        request_b = get_handler(ResolutionContext(scope=create_scope()))

        assert request_a["session"] is not request_b["session"]
