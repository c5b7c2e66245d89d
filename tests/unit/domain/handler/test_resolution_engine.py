"""Unit tests for ResolutionEngine key resolution and generic dispatch."""

from unittest.mock import MagicMock

import pytest

from remedy.domain.handler.model.descriptor import Descriptor
from remedy.domain.handler.model.store import HandlerStore
from remedy.domain.handler.service.resolution import ResolutionEngine
from remedy.domain.shared.error import ApiError, RemedyError, UnrecoverableError


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(notifier: MagicMock) -> HandlerStore:
    return HandlerStore(notifier=notifier)


@pytest.fixture
def engine(store: HandlerStore) -> ResolutionEngine:
    return ResolutionEngine(store)


SAMPLE_ERROR = ValueError("test")


class TestApiError:
    def test_is_a_remedy_error(self):
        error = ApiError("failed")

        assert isinstance(error, RemedyError)
        assert error.message == "failed"
        assert error.code == "ApiError"
        assert str(error) == "failed"


class TestHandleError:
    def test_missing_key_returns_false(self, engine, notifier):
        assert engine.handle_error("absent", SAMPLE_ERROR) is False
        notifier.assert_not_called()

    def test_string_handler_notifies_and_raises(self, engine, store, notifier):
        store.register("E1", "error 1")

        with pytest.raises(ApiError, match="error 1"):
            engine.handle_error("E1", SAMPLE_ERROR)

        notifier.assert_called_once_with({"severity": "negative", "message": "error 1"})

    def test_api_error_is_raised_from_failure(self, engine, store):
        store.register("E1", "error 1")

        with pytest.raises(ApiError) as exc_info:
            engine.handle_error("E1", SAMPLE_ERROR)

        assert exc_info.value.__cause__ is SAMPLE_ERROR

    def test_non_exception_failure_has_no_cause(self, engine, store):
        store.register("E1", "error 1")

        with pytest.raises(ApiError) as exc_info:
            engine.handle_error("E1", {"status": "bad"})

        assert exc_info.value.__cause__ is None

    def test_descriptor_with_hooks_and_notify(self, engine, store, notifier):
        before = MagicMock()
        after = MagicMock()
        store.register(
            "E2",
            {
                "message": "error 2",
                "before": before,
                "after": after,
                "silent": False,
                "notify": {"extra": 42},
            },
        )

        with pytest.raises(ApiError, match="error 2"):
            engine.handle_error("E2", SAMPLE_ERROR)

        before.assert_called_once()
        assert before.call_args.args[0] is SAMPLE_ERROR
        assert isinstance(before.call_args.args[1], Descriptor)
        notifier.assert_called_once_with(
            {"severity": "negative", "message": "error 2", "extra": 42}
        )
        after.assert_called_once()
        assert after.call_args.args[0] is SAMPLE_ERROR

    def test_descriptor_instance_handler(self, engine, store, notifier):
        store.register("E2", Descriptor(message="typed"))

        with pytest.raises(ApiError, match="typed"):
            engine.handle_error("E2", SAMPLE_ERROR)

        notifier.assert_called_once()

    def test_silent_descriptor_skips_notification(self, engine, store, notifier):
        store.register("E3", {"message": "error 3", "silent": True})

        with pytest.raises(ApiError, match="error 3"):
            engine.handle_error("E3", SAMPLE_ERROR)

        notifier.assert_not_called()

    def test_descriptor_without_message_raises_empty_message(self, engine, store, notifier):
        store.register("quiet", {"silent": True})

        with pytest.raises(ApiError) as exc_info:
            engine.handle_error("quiet", SAMPLE_ERROR)

        assert exc_info.value.message == ""
        notifier.assert_not_called()

    @pytest.mark.parametrize("result", [None, True, False, {}, "text", {"unrelated": 1}])
    def test_resolver_declining(self, engine, store, notifier, result):
        """A resolver that returns no descriptor leaves the failure unhandled."""
        store.register("E4", lambda failure: result)

        assert engine.handle_error("E4", SAMPLE_ERROR) is False
        notifier.assert_not_called()

    def test_resolver_returning_descriptor(self, engine, store, notifier):
        store.register("E5", lambda failure: {"message": f"error 5: {failure}"})

        with pytest.raises(ApiError, match="error 5: test"):
            engine.handle_error("E5", SAMPLE_ERROR)

        notifier.assert_called_once_with({"severity": "negative", "message": "error 5: test"})

    def test_none_silent_in_mapping_still_resolves(self, engine, store, notifier):
        store.register("E7", {"message": "x", "silent": None})

        with pytest.raises(ApiError, match="x"):
            engine.handle_error("E7", SAMPLE_ERROR)

        notifier.assert_called_once_with({"severity": "negative", "message": "x"})

    def test_resolver_passing_through_unset_options(self, engine, store, notifier):
        """Options read with .get() may be None; they fall back to the defaults."""
        options: dict = {}
        store.register(
            "E8",
            lambda failure: {"message": "x", "silent": options.get("silent"), "before": None},
        )

        with pytest.raises(ApiError, match="x"):
            engine.handle_error("E8", SAMPLE_ERROR)

        notifier.assert_called_once()

    def test_resolver_receives_failure(self, engine, store):
        resolver = MagicMock(return_value=None)
        store.register("E6", resolver)

        engine.handle_error("E6", SAMPLE_ERROR)

        resolver.assert_called_once_with(SAMPLE_ERROR)

    @pytest.mark.parametrize("handler", ["", 42, ["message"]])
    def test_unusable_handler_shapes(self, engine, store, notifier, handler):
        store.register("odd", handler)

        assert engine.handle_error("odd", SAMPLE_ERROR) is False
        notifier.assert_not_called()

    def test_parent_handler_is_used(self, notifier):
        parent = HandlerStore(handlers={"shared": "from parent"})
        child = HandlerStore(parent, notifier=notifier)

        with pytest.raises(ApiError, match="from parent"):
            ResolutionEngine(child).handle_error("shared", SAMPLE_ERROR)

        notifier.assert_called_once()


class TestHandleErrorKeySequence:
    def test_first_match_wins(self, engine, store, notifier):
        store.register("good", "ok")

        with pytest.raises(ApiError, match="ok"):
            engine.handle_error(["bad", "good"], SAMPLE_ERROR)

        notifier.assert_called_once_with({"severity": "negative", "message": "ok"})

    def test_left_to_right(self, engine, store, notifier):
        store.register_many({"first": "one", "second": "two"})

        with pytest.raises(ApiError, match="one"):
            engine.handle_error(["first", "second"], SAMPLE_ERROR)

        assert notifier.call_count == 1

    def test_none_entries_are_skipped(self, engine, store):
        store.register("k", "found")

        with pytest.raises(ApiError, match="found"):
            engine.handle_error([None, None, "k"], SAMPLE_ERROR)

    def test_keys_are_stringified(self, engine, store):
        store.register("404", "not found")

        with pytest.raises(ApiError, match="not found"):
            engine.handle_error([None, 404], SAMPLE_ERROR)

    def test_declining_resolver_moves_to_next_key(self, engine, store):
        store.register("skip", lambda failure: False)
        store.register("take", "taken")

        with pytest.raises(ApiError, match="taken"):
            engine.handle_error(["skip", "take"], SAMPLE_ERROR)

    def test_no_match_returns_false(self, engine):
        assert engine.handle_error(["a", None, "b"], SAMPLE_ERROR) is False

    def test_tuple_of_keys(self, engine, store):
        store.register("b", "second")

        with pytest.raises(ApiError, match="second"):
            engine.handle_error(("a", "b"), SAMPLE_ERROR)

    def test_empty_sequence_returns_false(self, engine):
        assert engine.handle_error([], SAMPLE_ERROR) is False


class TestExecuteDescriptor:
    def test_order_is_before_notify_after_raise(self, store):
        calls: list[str] = []
        store.set_notifier(lambda options: calls.append("notify"))
        descriptor = Descriptor(
            message="m",
            before=lambda failure, d: calls.append("before"),
            after=lambda failure, d: calls.append("after"),
        )

        with pytest.raises(ApiError):
            ResolutionEngine(store).execute_descriptor(SAMPLE_ERROR, descriptor)

        assert calls == ["before", "notify", "after"]

    def test_raising_before_hook_stops_the_sequence(self, engine, notifier):
        after = MagicMock()
        descriptor = Descriptor(
            message="m",
            before=MagicMock(side_effect=KeyError("hook bug")),
            after=after,
        )

        with pytest.raises(KeyError, match="hook bug"):
            engine.execute_descriptor(SAMPLE_ERROR, descriptor)

        notifier.assert_not_called()
        after.assert_not_called()

    def test_raising_after_hook_replaces_api_error(self, engine, notifier):
        descriptor = Descriptor(message="m", after=MagicMock(side_effect=KeyError("late")))

        with pytest.raises(KeyError, match="late"):
            engine.execute_descriptor(SAMPLE_ERROR, descriptor)

        notifier.assert_called_once()

    def test_raising_notifier_propagates(self, store):
        store.set_notifier(MagicMock(side_effect=RuntimeError("sink down")))

        with pytest.raises(RuntimeError, match="sink down"):
            ResolutionEngine(store).execute_descriptor(SAMPLE_ERROR, Descriptor(message="m"))


class TestDispatchGeneric:
    def test_none_is_unrecoverable(self, engine, notifier):
        with pytest.raises(UnrecoverableError, match="Unrecoverable error: error is None"):
            engine.dispatch(None)

        notifier.assert_not_called()

    def test_unrecoverable_is_not_an_api_error(self):
        assert not issubclass(UnrecoverableError, RemedyError)

    def test_unhandled_exception_is_reraised(self, engine):
        error = ValueError("boom")

        with pytest.raises(ValueError) as exc_info:
            engine.dispatch(error)

        assert exc_info.value is error

    def test_exception_resolved_by_class_name(self, engine, store, notifier):
        store.register("ValueError", "Bad value")

        with pytest.raises(ApiError, match="Bad value"):
            engine.dispatch(ValueError("boom"))

        notifier.assert_called_once_with({"severity": "negative", "message": "Bad value"})

    def test_declined_exception_is_reraised(self, engine, store):
        store.register("ValueError", lambda failure: None)
        error = ValueError("boom")

        with pytest.raises(ValueError) as exc_info:
            engine.dispatch(error)

        assert exc_info.value is error

    def test_non_exception_value_raises_type_error(self, engine):
        with pytest.raises(TypeError, match="42"):
            engine.dispatch(42)


class TestIntercept:
    def test_resolves_exception_raised_in_block(self, engine, store):
        store.register("KeyError", "Missing key")

        with pytest.raises(ApiError, match="Missing key"):
            with engine.intercept():
                raise KeyError("k")

    def test_unhandled_exception_passes_through(self, engine):
        with pytest.raises(KeyError):
            with engine.intercept():
                raise KeyError("k")

    def test_no_exception_no_dispatch(self, engine, notifier):
        with engine.intercept():
            value = 1

        assert value == 1
        notifier.assert_not_called()


class TestHandleErrorScalarKey:
    def test_int_key_is_stringified(self, engine, store, notifier):
        store.register("404", "not found")

        with pytest.raises(ApiError, match="not found"):
            engine.handle_error(404, SAMPLE_ERROR)

        notifier.assert_called_once()

    def test_missing_int_key_returns_false(self, engine):
        assert engine.handle_error(500, SAMPLE_ERROR) is False
