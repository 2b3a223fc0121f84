import numpy as np
import pytest
from charge_field.constants import K_FIELD, SOFTENING_RADIUS
from charge_field.core.field import evaluate, field_at, effective_positions, force_scale, min_distances
from charge_field.types import ChargeSource, EditGhost


def _sources():
    return [
        ChargeSource(1, (0.0, 2.0, 0.0), -0.001),
        ChargeSource(2, (1.5, 0.5, -1.0), 0.003),
        ChargeSource(3, (-2.0, 1.0, 2.0), -0.002),
    ]


def test_empty_sources_give_zero():
    E = evaluate((1.0, 2.0, 3.0), [])
    assert E.shape == (3,)
    assert np.all(E == 0.0)


def test_single_charge_coulomb_outside_softening():
    """Outside R with n=2:  E = k q d / r^3."""
    q = 0.5
    src = [ChargeSource(1, (0.0, 0.0, 0.0), q)]
    p = np.array([2.0, 0.0, 0.0])
    E = evaluate(p, src, decay_exponent=2.0)
    expected = K_FIELD * q * p / 2.0 ** 3
    assert np.allclose(E, expected)


def test_negative_charge_pulls_field_towards_it():
    src = [ChargeSource(1, (0.0, 2.0, 0.0), -0.001)]
    E = evaluate((0.0, 0.0, 0.0), src)
    assert E[1] > 0.0
    assert abs(E[0]) < 1e-15 and abs(E[2]) < 1e-15


@pytest.mark.parametrize("n", [0.5, 1.0, 2.0, 3.0, 4.5])
def test_continuous_across_softening_radius(n):
    """Both branches of the softened law agree at r = R."""
    src = [ChargeSource(1, (0.3, -0.2, 0.1), 1.0)]
    direction = np.array([1.0, 2.0, -2.0]) / 3.0
    inner = src[0].position + direction * (SOFTENING_RADIUS - 1e-9)
    outer = src[0].position + direction * (SOFTENING_RADIUS + 1e-9)
    E_in = evaluate(inner, src, decay_exponent=n)
    E_out = evaluate(outer, src, decay_exponent=n)
    assert np.allclose(E_in, E_out, rtol=1e-6, atol=0.0)


def test_softened_magnitude_is_constant_inside_radius_for_n2():
    """For n=2 the softened law gives |E| = k q / R^2 everywhere inside R."""
    src = [ChargeSource(1, (0.0, 0.0, 0.0), 1.0)]
    expected = K_FIELD / SOFTENING_RADIUS ** 2
    for r in (0.05, 0.2, 0.45):
        E = evaluate((0.0, 0.0, r), src, decay_exponent=2.0)
        assert np.linalg.norm(E) == pytest.approx(expected)


def test_sign_reversal_negates_field():
    sources = _sources()
    flipped = [ChargeSource(s.id, s.position, -s.charge) for s in sources]
    rng = np.random.default_rng(7)
    points = rng.uniform(-4.0, 4.0, size=(20, 3))
    for n in (1.0, 2.0, 3.0):
        pos, q = effective_positions(sources)
        pos_f, q_f = effective_positions(flipped)
        assert np.allclose(field_at(points, pos_f, q_f, n), -field_at(points, pos, q, n))


def test_superposition():
    sources = _sources()
    p = np.array([0.4, -0.7, 1.2])
    total = evaluate(p, sources)
    parts = sum(evaluate(p, [s]) for s in sources)
    assert np.allclose(total, parts)


def test_query_on_charge_is_finite():
    src = [ChargeSource(1, (1.0, 1.0, 1.0), 1.0)]
    E = evaluate((1.0, 1.0, 1.0), src, decay_exponent=4.0)
    assert np.all(np.isfinite(E))
    assert np.allclose(E, 0.0)


def test_ghost_overrides_target_position():
    sources = _sources()
    p1 = np.array([0.5, 3.0, -0.5])
    ghost = EditGhost(target_id=1, position=p1)

    moved = [ChargeSource(1, p1, -0.001)] + sources[1:]
    x = np.array([1.0, 1.0, 1.0])
    assert np.allclose(evaluate(x, sources, ghost), evaluate(x, moved))
    # The sources themselves are untouched
    assert np.allclose(sources[0].position, (0.0, 2.0, 0.0))


def test_ghost_for_unknown_id_is_ignored():
    sources = _sources()
    ghost = EditGhost(target_id=99, position=(9.0, 9.0, 9.0))
    x = np.array([0.0, 1.0, 0.0])
    assert np.allclose(evaluate(x, sources, ghost), evaluate(x, sources))


def test_decay_exponent_sets_falloff():
    src = [ChargeSource(1, (0.0, 0.0, 0.0), 1.0)]
    for n in (1.0, 2.0, 3.0):
        e1 = np.linalg.norm(evaluate((1.0, 0.0, 0.0), src, decay_exponent=n))
        e2 = np.linalg.norm(evaluate((2.0, 0.0, 0.0), src, decay_exponent=n))
        assert e1 / e2 == pytest.approx(2.0 ** n)


def test_force_scale():
    assert force_scale(0.0) == 1.0
    assert force_scale(2.0) == pytest.approx(100.0)
    assert force_scale(3.5) == pytest.approx(10 ** 3.5)


def test_min_distances():
    points = np.array([[0.0, 0.0, 0.0], [3.0, 0.0, 0.0]])
    positions = np.array([[1.0, 0.0, 0.0], [5.0, 0.0, 0.0]])
    assert np.allclose(min_distances(points, positions), [1.0, 2.0])
    assert np.all(np.isinf(min_distances(points, np.zeros((0, 3)))))
