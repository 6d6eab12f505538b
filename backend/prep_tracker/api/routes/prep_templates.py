"""Read-only role preparation templates."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from prep_tracker.core.errors import NotFoundError, UnknownRoleTypeError
from prep_tracker.observability.tracing import trace
from prep_tracker.services.prep_templates import (
    STUDY_TRACKS,
    available_rounds,
    get_prep_template,
    get_round_prep_content,
    topics_by_priority,
)

router = APIRouter()


@router.get("/prep-templates/{role_type}", tags=["prep-templates"])
def get_role_template(
    role_type: str,
    http_request: Request,
    round_type: Optional[str] = Query(default=None),
) -> dict:
    """Template for a role, or for one of its rounds when ``round_type`` is given."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "prep_templates.get",
        metadata={"role_type": role_type, "round_type": round_type},
        request_id=request_id,
    ):
        template = get_prep_template(role_type)
        if template is None:
            raise UnknownRoleTypeError(role_type)

        if round_type:
            content = get_round_prep_content(role_type, round_type)
            if content is None:
                raise NotFoundError(f"No {round_type} template for {role_type}")
            return {
                "role_type": role_type,
                **content,
                "key_topics": topics_by_priority(role_type, round_type),
                "request_id": request_id or "",
            }

        return {
            "role_type": role_type,
            "display_name": template["display_name"],
            "description": template["description"],
            "rounds": template["rounds"],
            "available_rounds": available_rounds(role_type),
            "study_track": [
                {"focus": focus, "topics": topics} for focus, topics in STUDY_TRACKS[role_type]
            ],
            "request_id": request_id or "",
        }
