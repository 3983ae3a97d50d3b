from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from assistant.inference.base import GenerationClient
from assistant.inference.config import get_generation_client
from assistant.insights import extract_pillar_insights, summarize_services
from assistant.ir.errors import ArchitectureNotFoundError, InvalidRequestError
from assistant.logging import ROUTES, get_logger
from assistant.pipeline.controller import (
    UNEXPECTED_FAULT_MESSAGE,
    ArchitectureLocks,
    AssistantController,
)
from assistant.schemas import (
    AssistantTurnRequest,
    AssistantTurnResponse,
    SaveCdkRequest,
    UpdateArchitectureRequest,
)
from assistant.store.base import ArchitectureStore
from assistant.store.config import get_store

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["assistant"])

# Shared by every controller so writes to one id are serialized across requests
_locks = ArchitectureLocks()


def get_controller(
    store: ArchitectureStore = Depends(get_store),
    client: GenerationClient = Depends(get_generation_client),
) -> AssistantController:
    return AssistantController(store=store, client=client, locks=_locks)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, **extra})


# ============================================================
# ASSISTANT TURN
# ============================================================

@router.post("/jarvis-assistant")
def assistant_turn(
    request: AssistantTurnRequest,
    controller: AssistantController = Depends(get_controller),
):
    """
    One chat turn against a stored architecture.

    Examples:
    - "Add a cache in front of the orders table"  -> graph edit
    - "Generate CDK code in python"                -> infrastructure code
    - "Why DynamoDB here?"                         -> plain answer
    """
    try:
        history = [m.model_dump() for m in request.message_history or []]
        result = controller.run_turn(request.message, request.architecture_id, history)

        return AssistantTurnResponse(
            response=result.response,
            architecture_updated=result.architecture_updated,
        ).model_dump(by_alias=True)

    except InvalidRequestError as e:
        return _error(400, str(e))
    except ArchitectureNotFoundError as e:
        return _error(404, str(e))
    except Exception:
        logger.exception("%s Error in assistant API", ROUTES)
        return _error(
            500,
            "An unexpected error occurred",
            response=UNEXPECTED_FAULT_MESSAGE,
        )


# ============================================================
# ARCHITECTURE RECORDS
# ============================================================

@router.get("/architecture/{architecture_id}")
def get_architecture(architecture_id: str, store: ArchitectureStore = Depends(get_store)):
    architecture = store.get(architecture_id)
    if architecture is None:
        return _error(404, str(ArchitectureNotFoundError(architecture_id)))
    return architecture.to_payload()


@router.get("/architecture/{architecture_id}/insights")
def get_architecture_insights(architecture_id: str, store: ArchitectureStore = Depends(get_store)):
    """Well-Architected pillar insights and a per-service summary table."""
    architecture = store.get(architecture_id)
    if architecture is None:
        return _error(404, str(ArchitectureNotFoundError(architecture_id)))

    return {
        "id": architecture_id,
        "pillars": extract_pillar_insights(architecture.metadata.get("rationale") or ""),
        "services": summarize_services(architecture),
    }


@router.post("/update-architecture")
def update_architecture(
    request: UpdateArchitectureRequest,
    controller: AssistantController = Depends(get_controller),
):
    try:
        controller.replace_graph(request.architecture_id, request.nodes, request.edges)
        return {"id": request.architecture_id, "message": "Architecture updated successfully"}

    except InvalidRequestError as e:
        return _error(400, str(e))
    except ArchitectureNotFoundError as e:
        return _error(404, str(e))
    except Exception:
        logger.exception("%s Error in update-architecture API", ROUTES)
        return _error(500, "An unexpected error occurred")


@router.post("/save-cdk")
def save_cdk(
    request: SaveCdkRequest,
    controller: AssistantController = Depends(get_controller),
):
    try:
        controller.save_cdk(request.architecture_id, request.cdk_code)
        return {"id": request.architecture_id, "message": "CDK code updated successfully"}

    except InvalidRequestError as e:
        return _error(400, str(e))
    except ArchitectureNotFoundError as e:
        return _error(404, str(e))
    except Exception:
        logger.exception("%s Error in save-cdk API", ROUTES)
        return _error(500, "An unexpected error occurred")
