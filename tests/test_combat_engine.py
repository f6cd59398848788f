import pytest

from battle_calc.simulators.combat import CombatEngine, simulate
from battle_calc.types import DiceSpec, FleetUnit
from battle_calc.units import get_unit

ITERATIONS = 20_000


def fleet(*unit_ids):
    return [get_unit(u) for u in unit_ids]


def rates_sum(result):
    return result.attacker_win_rate + result.defender_win_rate + result.draw_rate


# ----- Short circuits -----


def test_both_fleets_empty_is_a_draw():
    result = simulate([], [], iterations=1)
    assert (
        result.attacker_win_rate,
        result.defender_win_rate,
        result.draw_rate,
        result.avg_attacker_survivors,
        result.avg_defender_survivors,
    ) == (0, 0, 1, 0, 0)


def test_empty_attacker_loses_with_defender_intact():
    result = simulate([], fleet("cruiser", "fighter", "fighter"), iterations=1)
    assert result.attacker_win_rate == 0
    assert result.defender_win_rate == 1
    assert result.draw_rate == 0
    assert result.avg_attacker_survivors == 0
    assert result.avg_defender_survivors == 3


def test_empty_defender_loses_with_attacker_intact():
    result = simulate(fleet("cruiser", "pds"), [], iterations=5)
    assert result.attacker_win_rate == 1
    assert result.defender_win_rate == 0
    assert result.avg_attacker_survivors == 2
    assert result.avg_defender_survivors == 0
    assert result.seed is None


@pytest.mark.parametrize("iterations", [0, -5])
def test_non_positive_iterations_rejected(iterations):
    with pytest.raises(ValueError):
        simulate(fleet("cruiser"), fleet("cruiser"), iterations=iterations)
    with pytest.raises(ValueError):
        simulate([], [], iterations=iterations)


# ----- Statistical behaviour -----


def test_dreadnought_beats_cruiser():
    result = simulate(fleet("dreadnought"), fleet("cruiser"), iterations=50_000, seed=42)
    assert result.attacker_win_rate > 0.80
    assert result.defender_win_rate < 0.15


def test_mech_with_sustain_dominates_fighter():
    result = simulate(fleet("mech"), fleet("fighter"), iterations=ITERATIONS, seed=42)
    assert result.attacker_win_rate > 0.85


def test_fighters_overwhelm_destroyer_despite_barrage():
    result = simulate(
        fleet("fighter", "fighter", "fighter"), fleet("destroyer"),
        iterations=ITERATIONS, seed=42,
    )
    assert result.attacker_win_rate > 0.50


def test_barrage_has_no_effect_on_non_fighters():
    # cruiser hits 40%, destroyer 20%: P(cruiser wins) = .4*.8 / (1 - .6*.8)
    expected = 0.4 * 0.8 / (1 - 0.6 * 0.8)
    result = simulate(fleet("cruiser"), fleet("destroyer"), iterations=50_000, seed=42)
    assert result.attacker_win_rate == pytest.approx(expected, abs=0.01)


def test_space_cannon_only_defender_always_loses():
    result = simulate([get_unit("fighter")] * 100, [get_unit("pds")] * 10, iterations=5_000, seed=42)
    assert result.attacker_win_rate == pytest.approx(1.0, abs=0.001)
    assert result.avg_defender_survivors == 0
    assert result.avg_attacker_survivors == pytest.approx(95, abs=2)


def test_sustain_mirror_match_is_balanced_with_draws():
    result = simulate(fleet("dreadnought"), fleet("dreadnought"), iterations=ITERATIONS, seed=42)
    assert result.attacker_win_rate == pytest.approx(result.defender_win_rate, abs=0.05)
    assert result.draw_rate > 0.15


def test_war_suns_vs_dreadnoughts_is_competitive():
    result = simulate(
        fleet("war_sun", "war_sun"),
        fleet("dreadnought", "dreadnought", "dreadnought", "dreadnought"),
        iterations=5_000, seed=42,
    )
    assert 0.25 < result.attacker_win_rate < 0.75


def test_hit_assignment_protects_cheap_unit_behind_sustain():
    result = simulate(fleet("dreadnought", "fighter"), fleet("cruiser"), iterations=ITERATIONS, seed=42)
    assert result.attacker_win_rate > 0.90
    assert result.avg_attacker_survivors > 1.5


# ----- Determinism -----


def test_same_seed_is_reproducible():
    f = fleet("cruiser", "cruiser", "fighter")
    r1 = simulate(f, f, iterations=1000, seed=123)
    r2 = CombatEngine().simulate(f, f, iterations=1000, seed=123)
    assert r1 == r2


def test_different_seeds_differ():
    f = fleet("cruiser", "dreadnought", "fighter", "fighter")
    r1 = simulate(f, f, iterations=5000, seed=1)
    r2 = simulate(f, f, iterations=5000, seed=999)
    assert (r1.attacker_win_rate, r1.defender_win_rate) != (r2.attacker_win_rate, r2.defender_win_rate)


def test_unseeded_run_reports_chosen_seed():
    result = simulate(fleet("cruiser"), fleet("cruiser"), iterations=50)
    assert result.seed is not None
    replay = simulate(fleet("cruiser"), fleet("cruiser"), iterations=50, seed=result.seed)
    assert replay == result


# ----- Invariants -----


def test_large_fleet_rates_sum_to_one():
    attacker = fleet(
        "war_sun", "dreadnought", "dreadnought",
        "cruiser", "cruiser", "cruiser",
        "destroyer", "destroyer",
        "fighter", "fighter", "fighter", "fighter",
    )
    defender = fleet(
        "flagship", "dreadnought", "dreadnought", "dreadnought",
        "cruiser", "cruiser", "destroyer",
        "fighter", "fighter", "fighter",
    )
    result = simulate(attacker, defender, iterations=2_000, seed=42)
    assert rates_sum(result) == pytest.approx(1.0, abs=1e-9)
    assert 0 <= result.avg_attacker_survivors <= len(attacker)
    assert 0 <= result.avg_defender_survivors <= len(defender)
    assert result.iterations == 2_000
    assert result.seed == 42


@pytest.mark.parametrize("seed", [0, 7, 2**63])
def test_rates_sum_to_one_for_single_iteration(seed):
    result = simulate(fleet("carrier", "fighter"), fleet("destroyer", "infantry"), iterations=1, seed=seed)
    assert rates_sum(result) == pytest.approx(1.0)


def test_input_rosters_not_mutated():
    attacker = fleet("dreadnought", "fighter")
    defender = fleet("cruiser", "pds")
    before = (list(attacker), list(defender))
    simulate(attacker, defender, iterations=200, seed=3)
    assert (attacker, defender) == before


def test_mutual_certain_kill_is_a_draw():
    sure = FleetUnit(name="Sure", combat_value=1)
    result = simulate([sure], [sure], iterations=100, seed=1)
    assert result.draw_rate == 1.0
    assert result.avg_attacker_survivors == 0 and result.avg_defender_survivors == 0


def test_units_without_dice_stalemate_as_draw():
    idle = FleetUnit(name="Idle", combat_value=5, num_dice=0)
    result = simulate([idle], [idle, idle], iterations=10, seed=1)
    assert result.draw_rate == 1.0
    assert result.avg_attacker_survivors == 1
    assert result.avg_defender_survivors == 2


def test_bombardment_does_not_fire_in_space_combat():
    bomber = FleetUnit(name="Bomber", combat_value=5, num_dice=0, bombardment=DiceSpec(hit_on=1, count=5))
    idle = FleetUnit(name="Idle", combat_value=5, num_dice=0)
    result = simulate([bomber], [idle], iterations=10, seed=1)
    assert result.draw_rate == 1.0
    assert result.avg_defender_survivors == 1
