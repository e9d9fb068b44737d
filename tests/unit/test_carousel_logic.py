"""Tests for carousel business logic."""

import pytest

from mead.core.carousel_logic import (
    SWIPE_DISTANCE_THRESHOLD,
    CarouselController,
    CarouselState,
)


class TestCarouselState:
    def test_empty_carousel(self):
        state = CarouselState()
        assert state.total_items == 0
        assert state.current_item is None
        assert not state.has_multiple

    def test_single_item(self):
        state = CarouselState(source=("a",))
        assert state.current_item == "a"
        assert not state.has_multiple

    def test_excluded_items_are_hidden(self):
        state = CarouselState(source=("a", "b", "c"), excluded=frozenset({"b"}))
        assert state.images == ["a", "c"]
        assert state.total_items == 2

    def test_max_visible_caps_images(self):
        state = CarouselState(source=tuple("abcdefgh"), max_visible=6)
        assert state.images == list("abcdef")

    def test_cap_applies_after_exclusion(self):
        state = CarouselState(
            source=tuple("abcdefgh"), max_visible=6, excluded=frozenset({"a"})
        )
        assert state.images == list("bcdefg")


class TestCarouselController:
    def setup_method(self):
        self.controller = CarouselController()

    def test_rekey_starts_at_first_image(self):
        state = self.controller.rekey(["u1", "u2"], max_visible=6)
        assert state.current_index == 0
        assert state.excluded == frozenset()
        assert state.max_visible == 6

    def test_next_wraps_to_first(self):
        state = CarouselState(source=("a", "b", "c"), current_index=2)
        assert self.controller.next_image(state).current_index == 0

    def test_prev_wraps_to_last(self):
        state = CarouselState(source=("a", "b", "c"))
        assert self.controller.prev_image(state).current_index == 2

    def test_navigation_on_empty_carousel_is_noop(self):
        state = CarouselState()
        assert self.controller.next_image(state) == state
        assert self.controller.prev_image(state) == state

    def test_next_then_prev_round_trip(self):
        state = CarouselState(source=("a", "b", "c"), current_index=1)
        back = self.controller.prev_image(self.controller.next_image(state))
        assert back.current_index == 1

    def test_full_cycle_returns_to_start(self):
        state = CarouselState(source=("a", "b", "c", "d"), current_index=2)
        moved = state
        for _ in range(state.total_items):
            moved = self.controller.next_image(moved)
        assert moved.current_index == 2

    def test_go_to_valid_index(self):
        state = CarouselState(source=("a", "b", "c"))
        assert self.controller.go_to_index(state, 2).current_index == 2

    def test_go_to_invalid_index(self):
        state = CarouselState(source=("a", "b", "c"))
        assert self.controller.go_to_index(state, 3) == state
        assert self.controller.go_to_index(state, -1) == state

    def test_failure_of_current_image_resets_to_first(self):
        """u2 fails while shown: carousel moves back to u1."""
        state = CarouselState(source=("u1", "u2", "u3"), current_index=1)
        new_state = self.controller.report_load_failure(state, "u2")
        assert new_state.images == ["u1", "u3"]
        assert new_state.current_index == 0
        assert new_state.current_item == "u1"

    def test_failure_of_other_image_clamps_index(self):
        state = CarouselState(source=("u1", "u2", "u3"), current_index=2)
        new_state = self.controller.report_load_failure(state, "u1")
        assert new_state.images == ["u2", "u3"]
        assert new_state.current_index == 0

    def test_repeated_failure_is_idempotent(self):
        state = CarouselState(source=("u1", "u2", "u3"), current_index=1)
        once = self.controller.report_load_failure(state, "u3")
        twice = self.controller.report_load_failure(once, "u3")
        assert once == twice

    def test_all_images_failing_leaves_empty_carousel(self):
        state = CarouselState(source=("u1",))
        new_state = self.controller.report_load_failure(state, "u1")
        assert new_state.total_items == 0
        assert new_state.current_item is None

    def test_failure_reveals_next_capped_image(self):
        state = CarouselState(source=tuple("abcdefg"), max_visible=6)
        new_state = self.controller.report_load_failure(state, "c")
        assert new_state.images == ["a", "b", "d", "e", "f", "g"]

    @pytest.mark.parametrize("displacement", [0, 30, -40, SWIPE_DISTANCE_THRESHOLD])
    def test_short_swipe_is_ignored(self, displacement):
        state = CarouselState(source=("a", "b", "c"), current_index=1)
        assert self.controller.swipe(state, displacement).current_index == 1

    def test_left_swipe_shows_next(self):
        state = CarouselState(source=("a", "b", "c"), current_index=1)
        assert self.controller.swipe(state, -50).current_index == 2

    def test_right_swipe_shows_previous(self):
        state = CarouselState(source=("a", "b", "c"), current_index=1)
        assert self.controller.swipe(state, 50).current_index == 0

    def test_begin_and_end_swipe(self):
        state = CarouselState(source=("a", "b", "c"))
        started = self.controller.begin_swipe(state, 200)
        assert started.swipe_start_x == 200
        ended = self.controller.end_swipe(started, 120)
        assert ended.current_index == 1
        assert ended.swipe_start_x is None

    def test_end_swipe_without_start_is_noop(self):
        state = CarouselState(source=("a", "b"))
        assert self.controller.end_swipe(state, 500) == state
