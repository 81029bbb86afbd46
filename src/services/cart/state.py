"""Success-modal state shared by every screen that can add to cart."""

from __future__ import annotations

import logging

from src.models.cart import ConfirmationModal, ErrorNotice

logger = logging.getLogger(__name__)


class CartSuccessState:
    """Holds whichever signal the last cart request produced.

    Showing one signal clears the other, so a screen never renders a
    confirmation modal and an error toast together.
    """

    def __init__(self) -> None:
        self.modal: ConfirmationModal | None = None
        self.error: ErrorNotice | None = None

    @property
    def visible(self) -> bool:
        return self.modal is not None

    def show_confirmation(self, modal: ConfirmationModal) -> None:
        self.modal = modal
        self.error = None
        logger.debug("Showing cart confirmation for %s", modal.product_name)

    def show_error(self, notice: ErrorNotice) -> None:
        self.modal = None
        self.error = notice
        logger.debug("Showing cart error: %s", notice.message)

    def dismiss(self) -> None:
        self.modal = None
        self.error = None

    @property
    def presentation(self) -> ConfirmationModal | ErrorNotice | None:
        return self.modal or self.error
