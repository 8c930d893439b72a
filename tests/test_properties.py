"""Tests for the typed property holder."""

import numpy as np
import pytest

from rkimex.core import properties as P
from rkimex.core.errors import PropertyLookupError, PropertyWriteError
from rkimex.core.properties import PropertyHolder, PropertyKind
from rkimex.core.stages import StageValues


def test_typed_round_trip():
    props = PropertyHolder()
    stages = StageValues.single(np.ones((2, 3)))
    props.set_real(P.INITIAL_TIME, 0.5)
    props.set_vector(P.FINAL_VALUES, [1.0, 2.0])
    props.set_bool(P.STEP_ACCEPTED, True)
    props.set_stage_values(P.STAGE_VALUES, stages)
    props.set_opaque(P.SCHEME, "scheme")

    assert props.get_real(P.INITIAL_TIME) == 0.5
    assert np.allclose(props.get_vector(P.FINAL_VALUES), [1.0, 2.0])
    assert props.get_bool(P.STEP_ACCEPTED) is True
    assert props.get_stage_values(P.STAGE_VALUES) is stages
    assert props.get_opaque(P.SCHEME) == "scheme"
    assert len(props) == 5
    assert props.kind(P.STAGE_VALUES) is PropertyKind.STAGE_VALUES


def test_write_once():
    props = PropertyHolder()
    props.set_real("x", 1.0)
    with pytest.raises(PropertyWriteError, match="already set"):
        props.set_real("x", 2.0)
    with pytest.raises(PropertyWriteError):
        props.set_bool("x", False)


def test_missing_property():
    with pytest.raises(PropertyLookupError, match="not found"):
        PropertyHolder().get_real(P.ERROR_NORM)


def test_lookup_error_is_lookup_error():
    with pytest.raises(LookupError):
        PropertyHolder().get_vector("y")


def test_mistyped_access():
    props = PropertyHolder()
    props.set_real(P.FINAL_TIME, 1.0)
    with pytest.raises(PropertyLookupError, match="real"):
        props.get_vector(P.FINAL_TIME)


def test_vectors_are_read_only_copies():
    y = np.array([1.0, 2.0])
    props = PropertyHolder()
    props.set_vector(P.INITIAL_VALUES, y)
    y[0] = 99.0

    stored = props.get_vector(P.INITIAL_VALUES)
    assert stored[0] == 1.0
    with pytest.raises(ValueError):
        stored[0] = 5.0


def test_stage_values_type_checked():
    with pytest.raises(TypeError):
        PropertyHolder().set_stage_values(P.STAGE_VALUES, np.ones((2, 2)))


def test_membership_and_iteration():
    props = PropertyHolder()
    props.set_real("a", 1.0)
    props.set_bool("b", True)
    assert "a" in props and "c" not in props
    assert set(props) == {"a", "b"} == props.names()


def test_stage_values_pair():
    K1, K2 = np.ones((3, 2)), np.zeros((3, 2))
    stages = StageValues.pair(K1, K2)
    assert stages.is_additive
    assert stages.stages == 3
    assert np.allclose(stages.k_explicit, K1)
    assert np.allclose(stages.k_implicit, K2)
    assert not stages.k.flags.writeable

    with pytest.raises(ValueError):
        StageValues.pair(K1, np.zeros((2, 2)))
    with pytest.raises(TypeError):
        StageValues.single(K1).k_explicit
