"""Growth OS — Funnel Reconciler.

Keeps each stage total equal to the sum of its sources. Sources are treated as
ground truth: a directly edited total survives only until the next load.

Every function returns a new ``FunnelData``; the input is never mutated, so a
rejected edit leaves the caller's state untouched.
"""

from datetime import date
from typing import List, Optional, Tuple

from growthos.core.errors import ValidationError
from growthos.core.logging import get_logger
from growthos.models.funnel_models import DataSource, FunnelData, FunnelStage

logger = get_logger("analyzer.funnel")


def correction_note(total: int) -> str:
    return f"Auto-corrected: total updated to {total:,} to match sources"


def _today(today: Optional[date]) -> str:
    return (today or date.today()).isoformat()


def _check_count(value, field: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be a whole number")
    if value < 0:
        raise ValidationError(f"{field} must not be negative")
    return value


def _stage(data: FunnelData, stage_key: str) -> FunnelStage:
    try:
        return data.stages[stage_key]
    except KeyError:
        raise ValidationError(f"Unknown funnel stage '{stage_key}'")


def _check_index(stage: FunnelStage, stage_key: str, index: int) -> None:
    if not 0 <= index < len(stage.sources):
        raise ValidationError(f"Stage '{stage_key}' has no source at index {index}")


def reconcile(
    data: FunnelData, today: Optional[date] = None
) -> Tuple[FunnelData, List[str]]:
    """Overwrite any stage total that disagrees with its sources.

    Returns the reconciled copy and the keys of the stages that changed.
    Stages without sources have nothing to reconcile against and are kept.
    """
    result = data.model_copy(deep=True)
    corrected: List[str] = []

    for key, stage in result.stages.items():
        if not stage.sources:
            continue
        total = stage.sources_total
        if total != stage.value:
            logger.info(f"Stage '{key}' total {stage.value} != sources {total}; correcting")
            stage.value = total
            stage.notes = correction_note(total)
            stage.last_updated = _today(today)
            corrected.append(key)

    return result, corrected


def set_stage_total(
    data: FunnelData, stage_key: str, value: int, today: Optional[date] = None
) -> FunnelData:
    """Store a manually entered total verbatim; sources are left as they are."""
    _check_count(value, "Stage value")
    _stage(data, stage_key)

    result = data.model_copy(deep=True)
    stage = result.stages[stage_key]
    stage.value = value
    stage.data_source = DataSource.MANUAL
    stage.last_updated = _today(today)
    return result


def set_source_value(
    data: FunnelData,
    stage_key: str,
    index: int,
    value: int,
    today: Optional[date] = None,
) -> FunnelData:
    """Change one source value and recompute the stage total with it."""
    _check_count(value, "Source value")
    _check_index(_stage(data, stage_key), stage_key, index)

    result = data.model_copy(deep=True)
    stage = result.stages[stage_key]
    stage.sources[index].value = value
    stage.value = stage.sources_total
    stage.data_source = DataSource.MANUAL
    stage.last_updated = _today(today)
    return result


def rename_source(
    data: FunnelData,
    stage_key: str,
    index: int,
    name: str,
    today: Optional[date] = None,
) -> FunnelData:
    """Rename one source; the stage total is recomputed in the same write."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Source name must not be empty")
    _check_index(_stage(data, stage_key), stage_key, index)

    result = data.model_copy(deep=True)
    stage = result.stages[stage_key]
    stage.sources[index].name = name.strip()
    stage.value = stage.sources_total
    stage.last_updated = _today(today)
    return result
