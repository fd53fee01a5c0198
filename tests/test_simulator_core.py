"""Tests for the expected-value pack simulator."""

import pytest

from config import PackConfig, WantedCard, PACK_SELECTION, PACK_SECRET
from pool_state import SimulationState
from simulator_core import PackSimulator

NO_UR = 0.99


def make_simulator(wanted_cards, pack_type=PACK_SELECTION, total_ur_in_pack=8, rng=None):
    config = PackConfig(pack_type=pack_type, total_ur_in_pack=total_ur_in_pack,
                        wanted_cards=wanted_cards)
    return PackSimulator(config, rng=rng)


# =============================================================================
# Test Inventory State
# =============================================================================


class TestSimulationState:
    """Tests for the per-trial inventory tracker."""

    def test_starts_empty(self, wanted_cards):
        state = SimulationState(wanted_cards)
        assert state.obtained_counts == {"a": 0, "b": 0, "c": 0}
        assert state.cp == 0
        assert state.ur_pulled == 0
        assert state.has_pity is False

    def test_complete_only_when_every_count_reached(self, wanted_cards):
        state = SimulationState(wanted_cards)
        state.obtained_counts.update({"a": 1, "b": 1, "c": 1})
        assert not state.is_complete(wanted_cards)

        state.obtained_counts["b"] = 2
        assert state.is_complete(wanted_cards)

    def test_craftable_needed_skips_craft_disabled(self, wanted_cards):
        state = SimulationState(wanted_cards)
        # a is craft-disabled: b needs 2, c needs 1
        assert state.craftable_needed(wanted_cards) == 3


# =============================================================================
# Test Craft Loop
# =============================================================================


class TestCraftLoop:
    """Tests for converting disenchant points into wanted copies."""

    def test_first_eligible_card_in_list_order(self, wanted_cards):
        simulator = make_simulator(wanted_cards)
        state = simulator.new_state()
        state.cp = 100

        state = simulator.try_to_craft(state)

        assert state.obtained_counts == {"a": 0, "b": 2, "c": 1}
        assert state.cp == 10

    def test_partial_craft_goes_to_first_card(self, wanted_cards):
        simulator = make_simulator(wanted_cards)
        state = simulator.new_state()
        state.cp = 30

        state = simulator.try_to_craft(state)

        assert state.obtained_counts == {"a": 0, "b": 1, "c": 0}
        assert state.cp == 0

    def test_no_craft_below_cost(self, wanted_cards):
        simulator = make_simulator(wanted_cards)
        state = simulator.new_state()
        state.cp = 29

        state = simulator.try_to_craft(state)

        assert state.obtained_counts == {"a": 0, "b": 0, "c": 0}
        assert state.cp == 29

    def test_points_kept_when_only_disabled_cards_missing(self, wanted_cards):
        simulator = make_simulator(wanted_cards)
        state = simulator.new_state()
        state.obtained_counts.update({"b": 2, "c": 1})
        state.cp = 90

        state = simulator.try_to_craft(state)

        assert state.obtained_counts["a"] == 0
        assert state.cp == 90


# =============================================================================
# Test UR Resolution
# =============================================================================


class TestUrResolution:
    """Tests for mapping drawn URs onto wanted cards."""

    def test_slot_index_maps_to_wanted_card(self, wanted_cards, scripted):
        simulator = make_simulator(wanted_cards, rng=scripted(indices=[1]))
        state = simulator.process_pack_ur(simulator.new_state())

        assert state.obtained_counts["b"] == 1
        assert state.ur_pulled == 1
        assert state.cp == 0

    def test_unwanted_slot_is_disenchanted(self, wanted_cards, scripted):
        simulator = make_simulator(wanted_cards, rng=scripted(indices=[5]))
        state = simulator.process_pack_ur(simulator.new_state())

        assert state.obtained_counts == {"a": 0, "b": 0, "c": 0}
        assert state.cp == 10

    def test_card_already_full_is_disenchanted(self, wanted_cards, scripted):
        simulator = make_simulator(wanted_cards, rng=scripted(indices=[0]))
        state = simulator.new_state()
        state.obtained_counts["a"] = 1

        state = simulator.process_pack_ur(state)

        assert state.obtained_counts["a"] == 1
        assert state.cp == 10


# =============================================================================
# Test Selection Pack Trial
# =============================================================================


class TestSelectionPack:
    """Tests for the selection pack trial."""

    def test_pulls_until_wanted_card_drawn(self, scripted):
        cards = [WantedCard(id="a", name="A", count=1, disable_craft=True)]
        rng = scripted(randoms=[0.5, 0.3, 0.1], indices=[0])
        simulator = make_simulator(cards, total_ur_in_pack=1, rng=rng)

        result = simulator.simulate_selection_pack()

        assert result["pulls"] == 3
        assert result["ur_pulled"] == 1
        assert result["obtained_counts"] == {"a": 1}
        assert rng.exhausted

    def test_duplicates_are_crafted_into_missing_card(self, scripted):
        cards = [WantedCard(id="a", name="A", count=1)]
        rng = scripted(randoms=[0.1, 0.1, 0.1], indices=[1, 1, 1])
        simulator = make_simulator(cards, total_ur_in_pack=2, rng=rng)

        result = simulator.simulate_selection_pack()

        assert result["pulls"] == 3
        assert result["ur_pulled"] == 3
        assert result["obtained_counts"] == {"a": 1}
        assert result["cp"] == 0

    def test_inventory_and_craft_invariants_after_trials(self, wanted_cards, seeded_rng):
        simulator = make_simulator(wanted_cards, rng=seeded_rng)

        for _ in range(200):
            result = simulator.simulate_once()
            for card in wanted_cards:
                assert result["obtained_counts"][card.id] == card.count
            assert result["cp"] >= 0

    def test_craft_postcondition_for_any_points(self, wanted_cards):
        simulator = make_simulator(wanted_cards)

        for cp in range(0, 200, 7):
            state = simulator.new_state()
            state.cp = cp
            state = simulator.try_to_craft(state)
            assert state.cp < 30 or state.craftable_needed(wanted_cards) == 0
            assert all(state.obtained(card) <= card.count for card in wanted_cards)


# =============================================================================
# Test Secret Pack Trial
# =============================================================================


class TestSecretPack:
    """Tests for the secret pack trial with batches and pity."""

    def test_out_of_pack_slots_never_resolve_to_wanted_cards(self, scripted):
        cards = [WantedCard(id="a", name="A", count=1)]
        # slot 1 hits, remaining seven slots miss; randrange must not be called
        rng = scripted(randoms=[0.0] + [NO_UR] * 7)
        simulator = make_simulator(cards, pack_type=PACK_SECRET, total_ur_in_pack=1, rng=rng)

        state = simulator.pull_secret_pack(simulator.new_state(), is_tenth_pack=False)

        assert state.obtained_counts == {"a": 0}
        assert state.ur_pulled == 1
        assert state.cp == 10
        assert rng.exhausted

    def test_eighth_card_rates(self, wanted_cards):
        simulator = make_simulator(wanted_cards, pack_type=PACK_SECRET)

        assert simulator.in_pack_ur_rate(7, is_tenth_pack=True, has_pity=False) == 0.2
        assert simulator.in_pack_ur_rate(7, is_tenth_pack=True, has_pity=True) == 1.0
        assert simulator.in_pack_ur_rate(7, is_tenth_pack=False, has_pity=True) == 0.025
        assert simulator.in_pack_ur_rate(4, is_tenth_pack=True, has_pity=True) == 0.025

    def test_pity_forces_tenth_pack_eighth_card(self, scripted):
        cards = [WantedCard(id="a", name="A", count=1)]
        rng = scripted(randoms=[NO_UR] * 8, indices=[0])
        simulator = make_simulator(cards, pack_type=PACK_SECRET, total_ur_in_pack=1, rng=rng)
        state = simulator.new_state()
        state.has_pity = True

        state = simulator.pull_secret_pack(state, is_tenth_pack=True)

        assert state.obtained_counts == {"a": 1}
        assert rng.exhausted

    def test_dry_batch_triggers_pity_in_next_batch(self, scripted):
        cards = [WantedCard(id="a", name="A", count=1, disable_craft=True)]
        # batch 1: 80 misses, batch 2: only the pity slot succeeds
        rng = scripted(randoms=[NO_UR] * 160, indices=[0])
        simulator = make_simulator(cards, pack_type=PACK_SECRET, total_ur_in_pack=1, rng=rng)

        result = simulator.simulate_secret_pack()

        assert result["pulls"] == 20
        assert result["ur_pulled"] == 1
        assert rng.exhausted

    def test_out_of_pack_ur_prevents_pity(self, scripted):
        cards = [WantedCard(id="a", name="A", count=1, disable_craft=True)]
        # batch 1 has one out-of-pack UR, so batch 2 has no pity and batch 3 does
        rng = scripted(randoms=[0.0] + [NO_UR] * 239, indices=[0])
        simulator = make_simulator(cards, pack_type=PACK_SECRET, total_ur_in_pack=1, rng=rng)

        result = simulator.simulate_secret_pack()

        assert result["pulls"] == 30
        assert result["ur_pulled"] == 2
        assert result["cp"] == 10

    def test_early_exit_mid_batch(self, scripted):
        cards = [WantedCard(id="a", name="A", count=1, disable_craft=True)]
        # pull 3, slot 5 draws the wanted card
        randoms = [NO_UR] * 16 + [NO_UR] * 4 + [0.0] + [NO_UR] * 3
        rng = scripted(randoms=randoms, indices=[0])
        simulator = make_simulator(cards, pack_type=PACK_SECRET, total_ur_in_pack=1, rng=rng)

        result = simulator.simulate_secret_pack()

        assert result["pulls"] == 3
        assert rng.exhausted

    def test_inventory_invariant_after_trials(self, wanted_cards, seeded_rng):
        simulator = make_simulator(wanted_cards, pack_type=PACK_SECRET, rng=seeded_rng)

        for _ in range(100):
            result = simulator.simulate_once()
            assert all(result["obtained_counts"][card.id] == card.count for card in wanted_cards)

    @pytest.mark.parametrize("pack_type", [PACK_SELECTION, PACK_SECRET])
    def test_simulate_once_dispatches_by_pack_type(self, pack_type, seeded_rng):
        cards = [WantedCard(id="a", name="A", count=1)]
        simulator = make_simulator(cards, pack_type=pack_type, total_ur_in_pack=4, rng=seeded_rng)

        result = simulator.simulate_once()

        assert result["pulls"] >= 1
        assert result["obtained_counts"] == {"a": 1}
