from typing import Iterable, Optional


class WardrobeError(Exception):
    """Base class for errors raised by the wardrobe and recommendation layers."""

    code = "wardrobe_error"


class InsufficientWardrobeError(WardrobeError):
    """At least one required outfit slot has no candidate items.

    Expected, user-facing condition: ``missing`` names the empty slots so the
    client can prompt for exactly what to add.
    """

    code = "insufficient_wardrobe"

    def __init__(self, missing: Iterable[str], occasion: Optional[str] = None) -> None:
        self.missing = list(missing)
        self.occasion = occasion
        scope = f" for occasion {occasion!r}" if occasion else ""
        super().__init__(f"not enough items{scope}; missing: {', '.join(self.missing)}")


class EmptyPoolError(WardrobeError):
    """The sampler was handed zero candidates. Signals a programming defect."""

    code = "empty_pool"


class StorageError(WardrobeError):
    code = "storage_unavailable"


class NotFoundError(WardrobeError):
    code = "item_not_found"

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"item {item_id} not found")


class SessionNotFoundError(WardrobeError):
    code = "session_not_found"


class SessionExpiredError(WardrobeError):
    code = "session_expired"


class WearLoggingError(WardrobeError):
    """No wear could be recorded for an accepted outfit."""

    code = "wear_logging_failed"

    def __init__(self, failed: Iterable[str]) -> None:
        self.failed = list(failed)
        super().__init__(f"could not log wear for items: {', '.join(self.failed)}")


class NoCurrentOutfitError(WardrobeError):
    code = "no_current_outfit"


class AcceptedNotAdvancedError(WardrobeError):
    """Wears for an accepted outfit were logged but the next outfit could not be generated.

    Accepting the same outfit again retries only the generation; the wears are
    not logged a second time.
    """

    code = "accepted_not_advanced"

    def __init__(self, outfit_id: str, worn: Iterable[str], failed: Iterable[str], cause: WardrobeError) -> None:
        self.outfit_id = outfit_id
        self.worn = list(worn)
        self.failed = list(failed)
        self.cause = cause
        super().__init__(f"outfit {outfit_id} accepted but no new outfit: {cause}")
