"""Image carousel business logic - platform agnostic.

The carousel shows the images of the selected detail record one at a time.
Images that fail to load are excluded for the rest of the selection, the
index wraps around at both ends, and a horizontal swipe longer than
SWIPE_DISTANCE_THRESHOLD pixels steps one image. The controller is stateless:
every operation takes a CarouselState and returns the next one.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace

SWIPE_DISTANCE_THRESHOLD = 40


@dataclass(frozen=True)
class CarouselState:
    """State for the image carousel of one detail panel.

    Attributes:
        source: Image URLs of the detail record, in order.
        current_index: Index into ``images`` of the image shown.
        excluded: URLs that failed to load.
        swipe_start_x: Pointer x of an ongoing swipe, None otherwise.
        max_visible: Cap on the number of images offered, None for no cap.
    """

    source: tuple[str, ...] = ()
    current_index: int = 0
    excluded: frozenset[str] = frozenset()
    swipe_start_x: float | None = None
    max_visible: int | None = None

    @property
    def images(self) -> list[str]:
        visible = [url for url in self.source if url not in self.excluded]
        if self.max_visible is not None:
            return visible[: self.max_visible]
        return visible

    @property
    def total_items(self) -> int:
        return len(self.images)

    @property
    def current_item(self) -> str | None:
        images = self.images
        if 0 <= self.current_index < len(images):
            return images[self.current_index]
        return None

    @property
    def has_multiple(self) -> bool:
        return self.total_items > 1


class CarouselController:
    """Controls carousel navigation, exclusion and re-keying."""

    def rekey(
        self,
        images: Iterable[str] = (),
        max_visible: int | None = None,
    ) -> CarouselState:
        """Start over for a new selection or detail record."""
        return CarouselState(source=tuple(images), max_visible=max_visible)

    def _clamped(self, state: CarouselState) -> CarouselState:
        total = state.total_items
        if total > 0 and state.current_index >= total:
            return replace(state, current_index=0)
        return state

    def next_image(self, state: CarouselState) -> CarouselState:
        """Move to the next image, wrapping to the first."""
        total = state.total_items
        if total == 0:
            return state
        return self._clamped(
            replace(state, current_index=(state.current_index + 1) % total)
        )

    def prev_image(self, state: CarouselState) -> CarouselState:
        """Move to the previous image, wrapping to the last."""
        total = state.total_items
        if total == 0:
            return state
        return self._clamped(
            replace(state, current_index=(state.current_index - 1 + total) % total)
        )

    def go_to_index(self, state: CarouselState, index: int) -> CarouselState:
        """Jump to a specific image; out-of-range indexes are ignored."""
        if 0 <= index < state.total_items:
            return replace(state, current_index=index)
        return state

    def report_load_failure(self, state: CarouselState, url: str) -> CarouselState:
        """Exclude an image that failed to load.

        Reporting the same URL again returns the state unchanged. When the
        failed image is the one on screen the carousel goes back to the first
        remaining image.
        """
        if not url or url in state.excluded:
            return state
        was_current = state.current_item == url
        new_state = replace(state, excluded=state.excluded | {url})
        if was_current:
            new_state = replace(new_state, current_index=0)
        return self._clamped(new_state)

    def swipe(self, state: CarouselState, displacement: float) -> CarouselState:
        """Apply a horizontal swipe of ``displacement`` pixels.

        A rightward swipe (positive) shows the previous image, a leftward one
        the next image. Swipes up to the threshold do nothing.
        """
        if abs(displacement) <= SWIPE_DISTANCE_THRESHOLD:
            return state
        if displacement > 0:
            return self.prev_image(state)
        return self.next_image(state)

    def begin_swipe(self, state: CarouselState, x: float) -> CarouselState:
        return replace(state, swipe_start_x=x)

    def end_swipe(self, state: CarouselState, x: float) -> CarouselState:
        """Finish a swipe started with begin_swipe()."""
        if state.swipe_start_x is None:
            return state
        displacement = x - state.swipe_start_x
        return self.swipe(replace(state, swipe_start_x=None), displacement)
