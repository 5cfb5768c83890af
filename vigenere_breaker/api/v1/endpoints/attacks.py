from fastapi import APIRouter, Query, status

from vigenere_breaker.api.v1.errors import to_http_exception
from vigenere_breaker.core.exceptions import CryptanalysisError
from vigenere_breaker.dependencies import AttackManagerDep
from vigenere_breaker.models.schemas import (
    AttackListResponse,
    AttackRequest,
    AttackResponse,
    ErrorResponse,
    ExportPayload,
    ResultsResponse,
)
from vigenere_breaker.services.engine.orchestrator import AttackOrchestrator

router = APIRouter()


def _to_response(orchestrator: AttackOrchestrator) -> AttackResponse:
    return AttackResponse(
        attack_id=orchestrator.attack_id,
        status=orchestrator.status,
        outcome=orchestrator.outcome,
        scoring_method=orchestrator.scoring_method,
        worker_count=orchestrator.worker_count,
        progress=orchestrator.progress(),
        error=orchestrator.error,
    )


@router.post(
    "",
    response_model=AttackResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid attack configuration"},
    },
    summary="Start a key-space attack",
    description=(
        "Enumerate every key up to max_key_length over the alphabet, decrypt "
        "the ciphertext under each and rank the candidates with the chosen "
        "scoring method. The attack runs in the background."
    ),
)
def start_attack(
    request: AttackRequest,
    manager: AttackManagerDep,
) -> AttackResponse:
    try:
        orchestrator = manager.create(request)
    except CryptanalysisError as e:
        raise to_http_exception(e)
    return _to_response(orchestrator)


@router.get(
    "",
    response_model=AttackListResponse,
    summary="List attacks",
)
async def list_attacks(manager: AttackManagerDep) -> AttackListResponse:
    items = [_to_response(orchestrator) for orchestrator in manager.list()]
    return AttackListResponse(items=items, total=len(items))


@router.get(
    "/{attack_id}",
    response_model=AttackResponse,
    responses={404: {"model": ErrorResponse, "description": "Attack not found"}},
    summary="Get attack status and progress",
)
async def get_attack(attack_id: str, manager: AttackManagerDep) -> AttackResponse:
    try:
        return _to_response(manager.get(attack_id))
    except CryptanalysisError as e:
        raise to_http_exception(e)


@router.get(
    "/{attack_id}/results",
    response_model=ResultsResponse,
    responses={404: {"model": ErrorResponse, "description": "Attack not found"}},
    summary="Get ranked candidates",
)
async def get_results(
    attack_id: str,
    manager: AttackManagerDep,
    limit: int | None = Query(default=None, ge=1, le=1000),
) -> ResultsResponse:
    try:
        orchestrator = manager.get(attack_id)
    except CryptanalysisError as e:
        raise to_http_exception(e)

    ranked = orchestrator.results()
    shown = ranked if limit is None else ranked[:limit]
    return ResultsResponse(
        attack_id=attack_id,
        results=[candidate.to_data() for candidate in shown],
        total=len(ranked),
    )


@router.post(
    "/{attack_id}/stop",
    response_model=AttackResponse,
    responses={404: {"model": ErrorResponse, "description": "Attack not found"}},
    summary="Cancel an attack",
    description="Idempotent. Results gathered so far stay available.",
)
def stop_attack(attack_id: str, manager: AttackManagerDep) -> AttackResponse:
    try:
        return _to_response(manager.stop(attack_id))
    except CryptanalysisError as e:
        raise to_http_exception(e)


@router.get(
    "/{attack_id}/export",
    response_model=ExportPayload,
    responses={
        404: {"model": ErrorResponse, "description": "Attack not found"},
        409: {"model": ErrorResponse, "description": "Nothing to export yet"},
    },
    summary="Export attack inputs, results and counters",
)
async def export_attack(attack_id: str, manager: AttackManagerDep) -> ExportPayload:
    try:
        return manager.get(attack_id).export()
    except CryptanalysisError as e:
        raise to_http_exception(e)


@router.delete(
    "/{attack_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Attack not found"}},
    summary="Stop and forget an attack",
)
def delete_attack(attack_id: str, manager: AttackManagerDep) -> None:
    try:
        manager.delete(attack_id)
    except CryptanalysisError as e:
        raise to_http_exception(e)
