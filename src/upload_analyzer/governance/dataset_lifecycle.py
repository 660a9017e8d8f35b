from upload_analyzer.utils.exceptions import InvalidStatusTransitionError


class DatasetStatus:
    PENDING = "pending"
    ANALYZING = "analyzing"
    PENDING_ADJUSTMENT = "pending_adjustment"
    ANALYZED = "analyzed"
    CONFIRMED = "confirmed"
    ERROR = "error"

    # ERROR is reachable from every state and handled separately
    _TRANSITIONS = {
        PENDING: {ANALYZING},
        ANALYZING: {PENDING_ADJUSTMENT, ANALYZED},
        PENDING_ADJUSTMENT: {CONFIRMED},
        ANALYZED: {CONFIRMED},
        CONFIRMED: set(),
        ERROR: set(),
    }

    @classmethod
    def is_valid(cls, status: str) -> bool:
        return status in cls._TRANSITIONS

    @classmethod
    def can_transition(cls, current: str, target: str) -> bool:
        if not cls.is_valid(current) or not cls.is_valid(target):
            return False
        if target == cls.ERROR:
            return True
        return target in cls._TRANSITIONS[current]


def ensure_transition(current: str, target: str) -> str:
    """
    Return target when the lifecycle allows current -> target.
    """
    if not DatasetStatus.can_transition(current, target):
        raise InvalidStatusTransitionError(
            f"Invalid dataset status transition: {current} -> {target}"
        )
    return target


def status_after_analysis(needs_adjustment: bool) -> str:
    """
    The only transition driven by analysis output: leaving ANALYZING.
    """
    if needs_adjustment:
        return DatasetStatus.PENDING_ADJUSTMENT
    return DatasetStatus.ANALYZED
