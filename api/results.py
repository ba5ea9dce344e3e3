# api/results.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from errors import DrawError
from models import parse_identity
from services.draw import DrawService, get_service
from api.draws import error_response

router = APIRouter()

def _bad_identity(e: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "BadIdentity", "message": str(e)})

@router.get("/results/{caller}")
def result_item(caller: str, svc: DrawService = Depends(get_service)):
    try:
        ident = parse_identity(caller)
    except ValueError as e:
        return _bad_identity(e)
    try:
        rec = svc.current_result(ident)
    except DrawError as e:
        return error_response(e)
    if rec is None:
        return JSONResponse(status_code=404, content={"error": "NotFound", "message": "no draw for this caller"})
    return {"key_hex": svc.key_for(ident).hex(), **rec.model_dump()}

@router.get("/results/{caller}/nonce")
def result_nonce(caller: str, svc: DrawService = Depends(get_service)):
    """nonce, который владелец должен подписать для следующего розыгрыша."""
    try:
        ident = parse_identity(caller)
    except ValueError as e:
        return _bad_identity(e)
    try:
        return {"nonce": svc.current_nonce(ident)}
    except DrawError as e:
        return error_response(e)
