import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status

from ..config import DOCUMENT_TYPES, MAX_DOCUMENT_SIZE
from ..deps import get_identity_store, get_token_claims
from ..errors import ValidationError
from ..models.voter_model import CountryUpdate, VoterLogin, VoterRegister
from ..schemas import VoterOut, dump
from ..security import create_access_token, hash_password
from ..storage_mongo import IdentityStore
from ..verification import store_document, validate_document, verify_document_later

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _session_token(voter: dict) -> str:
    return create_access_token({"sub": str(voter["_id"]), "name": voter.get("name")})


def _check_document_type(document_type: str):
    if document_type not in DOCUMENT_TYPES:
        raise ValidationError(f"Unsupported document type. Use one of: {', '.join(DOCUMENT_TYPES)}")


@router.post("/login")
def login(data: VoterLogin, identity: IdentityStore = Depends(get_identity_store)):
    """Log in with identity-document details; first login creates the voter."""
    _check_document_type(data.document_type)
    voter, created = identity.find_or_create(data.name, data.country, data.document_type, data.document_id)
    if created:
        logger.info(f"New voter {voter['_id']} from {data.country}")
    return {
        "success": True,
        "token": _session_token(voter),
        "user": dump(VoterOut.from_document(voter)),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: VoterRegister, identity: IdentityStore = Depends(get_identity_store)):
    _check_document_type(data.document_type)
    voter = identity.register(
        name=data.name,
        email=data.email,
        country=data.country,
        document_type=data.document_type,
        document_id=data.document_id,
        password_hash=hash_password(data.password),
    )
    return {
        "success": True,
        "message": "User registered successfully",
        "user": dump(VoterOut.from_document(voter)),
    }


@router.get("/me")
def me(claims: dict = Depends(get_token_claims), identity: IdentityStore = Depends(get_identity_store)):
    voter = identity.require_voter(claims.get("sub"))
    return {"success": True, "user": dump(VoterOut.from_document(voter))}


@router.post("/verify-document", status_code=status.HTTP_202_ACCEPTED)
def verify_document(
    background_tasks: BackgroundTasks,
    document: UploadFile = File(...),
    voter_ref: Optional[str] = Form(None, alias="voterRef"),
    user_id: Optional[str] = Form(None, alias="userId"),
    identity: IdentityStore = Depends(get_identity_store),
):
    """
    Accept an identity document and schedule its (simulated) verification.

    The response does not wait for the verification; the voter's
    documentVerified flag flips once the background task has run.
    """
    voter_id = voter_ref or user_id
    if not voter_id:
        raise ValidationError("voterRef is required")
    identity.require_voter(voter_id)

    data = document.file.read(MAX_DOCUMENT_SIZE + 1)
    validate_document(document.filename, document.content_type, len(data))
    path = store_document(voter_id, document.filename, data)

    background_tasks.add_task(verify_document_later, identity, voter_id, path)
    return {"success": True, "message": "Document received, verification in progress"}


@router.put("/profile/{voter_id}")
def update_country(voter_id: str, data: CountryUpdate,
                   identity: IdentityStore = Depends(get_identity_store)):
    voter = identity.update_country(voter_id, data.country)
    return {"success": True, "user": dump(VoterOut.from_document(voter))}
