import numpy as np
import pytest

from native_dispatch.core import (
    ArityError,
    Call,
    CatalogDefectError,
    Invocation,
    OverloadSet,
    Parameter,
    ResolutionError,
    Resolver,
    Signature,
    TypeMismatchError,
    UnknownKeywordError,
    resolve,
)
from native_dispatch.core.resolver import bind, rewrite_out_group


def _add_overloads() -> OverloadSet:
    return OverloadSet(
        (
            Signature("add", "_add_tensor", (Parameter("self", "Tensor"), Parameter("other", "Tensor"))),
            Signature("add", "_add_scalar", (Parameter("self", "Tensor"), Parameter("other", "Scalar"))),
        )
    )


def _sum_overloads() -> OverloadSet:
    return OverloadSet(
        (
            Signature(
                "sum",
                "_sum_dim",
                (
                    Parameter("self", "Tensor"),
                    Parameter("dim", "int[1]", has_default=True, default=[0]),
                    Parameter("keepdim", "bool", has_default=True, default=False),
                ),
            ),
        )
    )


def _max_overloads() -> OverloadSet:
    return OverloadSet(
        (
            Signature("max", "_max", (Parameter("self", "Tensor"),)),
            Signature(
                "max",
                "_max_dim",
                (
                    Parameter("self", "Tensor"),
                    Parameter("dim", "int"),
                    Parameter("keepdim", "bool", has_default=True, default=False),
                ),
            ),
            Signature(
                "max",
                "_max_dim_max",
                (
                    Parameter("self", "Tensor"),
                    Parameter("dim", "int"),
                    Parameter("keepdim", "bool", has_default=True, default=False),
                    Parameter("max", "Tensor(a!)", positional=False),
                    Parameter("max_values", "Tensor(b!)", positional=False),
                ),
                out_count=2,
            ),
        )
    )


def test_scalar_argument_selects_scalar_overload(x: np.ndarray) -> None:
    result = resolve(_add_overloads(), [x, 5])
    assert result.callee_name == "_add_scalar"
    assert result.args[0] is x
    assert result.args[1] == 5


def test_tensor_argument_selects_tensor_overload(x: np.ndarray, y: np.ndarray) -> None:
    result = resolve(_add_overloads(), [x, y])
    assert result.callee_name == "_add_tensor"
    assert result.args == (x, y)


def test_too_many_arguments_reports_arity(x: np.ndarray, y: np.ndarray) -> None:
    with pytest.raises(ArityError) as exc:
        resolve(_add_overloads(), [x, y, x])
    assert str(exc.value) == "wrong number of arguments (given 3, expected 2)"
    assert exc.value.kind == "arity"


def test_arity_range_is_reported(x: np.ndarray) -> None:
    with pytest.raises(ArityError) as exc:
        resolve(_max_overloads(), [])
    assert str(exc.value) == "wrong number of arguments (given 0, expected 1..3)"
    with pytest.raises(ArityError):
        resolve(_max_overloads(), [x, 0, False, x])


def test_trailing_none_values_are_trimmed(x: np.ndarray) -> None:
    result = resolve(_add_overloads(), [x, 2.5, None, None])
    assert result.callee_name == "_add_scalar"


def test_scalar_broadcast_and_defaults(x: np.ndarray) -> None:
    result = resolve(_sum_overloads(), [x], {"dim": 2})
    assert result == Invocation("_sum_dim", (x, [2], False))


def test_defaults_fill_unbound_parameters(x: np.ndarray) -> None:
    result = resolve(_sum_overloads(), [x])
    assert result.args[1:] == ([0], False)


def test_list_defaults_are_not_shared_between_calls(x: np.ndarray) -> None:
    first = resolve(_sum_overloads(), [x])
    first.args[1].append(99)
    second = resolve(_sum_overloads(), [x])
    assert second.args[1] == [0]


def test_explicit_none_falls_back_to_default(x: np.ndarray) -> None:
    result = resolve(_sum_overloads(), [x], {"keepdim": None})
    assert result.args[2] is False


def test_keyword_overrides_positional_value(x: np.ndarray) -> None:
    result = resolve(_sum_overloads(), [x, 1], {"dim": [3, 4]})
    assert result.args[1] == [3, 4]


def test_args_follow_declared_order_not_caller_order(x: np.ndarray) -> None:
    result = resolve(_sum_overloads(), [x], {"keepdim": True, "dim": [1]})
    assert result.args == (x, [1], True)


def test_unknown_keyword_reported_before_type_checks(x: np.ndarray) -> None:
    with pytest.raises(UnknownKeywordError) as exc:
        resolve(_add_overloads(), ["not a tensor", 1], {"bogus": 1})
    assert str(exc.value) == "unknown keyword: bogus"
    assert exc.value.keyword == "bogus"


def test_first_unknown_keyword_is_reported(x: np.ndarray) -> None:
    with pytest.raises(UnknownKeywordError) as exc:
        resolve(_sum_overloads(), [x], {"keepdim": True, "first": 1, "second": 2})
    assert exc.value.keyword == "first"


def test_single_candidate_mismatch_renames_self(x: np.ndarray) -> None:
    with pytest.raises(TypeMismatchError) as exc:
        resolve(_sum_overloads(), [[1, 2]])
    assert str(exc.value) == "sum(): argument 'input' must be Tensor"
    assert exc.value.argument == "input"
    assert isinstance(exc.value, ResolutionError)
    assert isinstance(exc.value, TypeError)


def test_single_candidate_mismatch_names_parameter(x: np.ndarray) -> None:
    with pytest.raises(TypeMismatchError) as exc:
        resolve(_sum_overloads(), [x], {"keepdim": 1})
    assert str(exc.value) == "sum(): argument 'keepdim' must be bool"


def test_mismatch_across_candidates_is_an_internal_defect(x: np.ndarray) -> None:
    with pytest.raises(CatalogDefectError) as exc:
        resolve(_add_overloads(), [x, "five"])
    assert "Please report a bug with add." in str(exc.value)
    assert not isinstance(exc.value, ResolutionError)


def test_multiple_passing_candidates_fail_loudly(x: np.ndarray) -> None:
    overloads = OverloadSet(
        (
            Signature("f", "_f_a", (Parameter("self", "Tensor"), Parameter("v", "float"))),
            Signature("f", "_f_b", (Parameter("self", "Tensor"), Parameter("v", "Scalar"))),
        )
    )
    with pytest.raises(CatalogDefectError) as exc:
        resolve(overloads, [x, 1.0])
    assert "got 2" in str(exc.value)


def test_out_overloads_require_out_option(x: np.ndarray) -> None:
    result = resolve(_max_overloads(), [x, 1])
    assert result.callee_name == "_max_dim"
    assert result.args == (x, 1, False)


def test_out_group_fans_out_to_trailing_parameters(x: np.ndarray, y: np.ndarray) -> None:
    values = np.empty(2)
    indices = np.empty(2)
    kwargs = {"out": [values, indices]}
    result = resolve(_max_overloads(), [x, 1], kwargs)
    assert result.callee_name == "_max_dim_max"
    assert result.args[3] is values
    assert result.args[4] is indices
    assert "out" in kwargs


def test_rewrite_out_group_replaces_out_entry(x: np.ndarray) -> None:
    a, b = np.empty(1), np.empty(1)
    candidates = _max_overloads().signatures
    narrowed, options = rewrite_out_group(candidates, {"out": (a, b), "keepdim": True})
    assert [sig.callee_name for sig in narrowed] == ["_max_dim_max"]
    assert "out" not in options
    assert options["max"] is a
    assert options["max_values"] is b
    assert options["keepdim"] is True


def test_out_group_requires_a_sequence(x: np.ndarray) -> None:
    with pytest.raises(TypeMismatchError) as exc:
        resolve(_max_overloads(), [x, 1], {"out": np.empty(1)})
    assert "argument 'out'" in str(exc.value)


def test_unknown_keyword_reported_before_out_group_shape(x: np.ndarray) -> None:
    with pytest.raises(UnknownKeywordError) as exc:
        resolve(_max_overloads(), [x, 1], {"out": np.empty(1), "bogus": 1})
    assert exc.value.keyword == "bogus"


def test_false_out_counts_as_not_supplied(x: np.ndarray) -> None:
    result = resolve(_max_overloads(), [x, 1], {"out": None})
    assert result.callee_name == "_max_dim"
    with pytest.raises(UnknownKeywordError) as exc:
        resolve(_max_overloads(), [x, 1], {"out": False})
    assert str(exc.value) == "unknown keyword: out"


def test_out_group_type_errors_surface_for_output_params(x: np.ndarray) -> None:
    with pytest.raises(TypeMismatchError) as exc:
        resolve(_max_overloads(), [x, 1], {"out": [np.empty(1), "bad"]})
    assert str(exc.value) == "max(): argument 'max_values' must be Tensor"


def test_bind_maps_positionals_in_declared_order(x: np.ndarray) -> None:
    signature = _max_overloads().signatures[1]
    binding = bind(signature, (x, 2), {})
    assert binding == {"self": x, "dim": 2, "keepdim": False}


def test_resolution_does_not_mutate_inputs_and_is_idempotent(x: np.ndarray) -> None:
    args = [x, 1, None]
    kwargs = {"out": [np.empty(1), np.empty(1)]}
    call = Call(args=args, kwargs=kwargs)
    resolver = Resolver()
    first = resolver.resolve_call(_max_overloads(), call)
    second = resolver.resolve_call(_max_overloads(), call)
    assert first.callee_name == second.callee_name
    assert all(a is b for a, b in zip(first.args, second.args))
    assert args == [x, 1, None]
    assert list(kwargs) == ["out"]


def test_custom_tensor_predicate() -> None:
    class FakeTensor:
        pass

    tensor = FakeTensor()
    resolver = Resolver(is_tensor=lambda value: isinstance(value, FakeTensor))
    result = resolver.resolve(_add_overloads(), [tensor, 1])
    assert result.callee_name == "_add_scalar"
    with pytest.raises(CatalogDefectError):
        resolver.resolve(_add_overloads(), [np.zeros(1), 1])


def test_invocation_as_dict(x: np.ndarray) -> None:
    result = resolve(_add_overloads(), [x, 5])
    assert result.as_dict() == {"callee_name": "_add_scalar", "args": [x, 5]}
