# api/draws.py
import base58
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from errors import DrawError, AuthorizationError, InvalidSigner, StorageError, ValidationError
from models import DrawIn, DrawOut, encode_identity, parse_identity
from services.draw import DrawService, get_service

router = APIRouter()

def error_status(e: DrawError) -> int:
    if isinstance(e, ValidationError):
        return 400
    if isinstance(e, InvalidSigner):
        return 401
    if isinstance(e, AuthorizationError):
        return 403
    if isinstance(e, StorageError):
        return 503
    return 500

def error_response(e: DrawError) -> JSONResponse:
    return JSONResponse(status_code=error_status(e), content={"error": e.code, "message": e.message})

@router.post("/draws", response_model=DrawOut)
def draw(body: DrawIn = Body(...), svc: DrawService = Depends(get_service)):
    caller = parse_identity(body.caller)
    proof = None
    if body.signature:
        try:
            proof = base58.b58decode(body.signature)
        except ValueError:
            # битая подпись = отсутствующая подпись
            proof = None
    try:
        result = svc.generate_random(caller, proof, body.uid, parse_identity(body.participant))
    except DrawError as e:
        return error_response(e)

    return DrawOut(
        caller=encode_identity(caller),
        key_hex=svc.key_for(caller).hex(),
        value=result.value,
        uid=result.uid,
        timestamp=result.timestamp,
        nonce=result.nonce,
    )
