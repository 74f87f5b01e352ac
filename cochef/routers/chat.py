import logging

from fastapi import APIRouter, Depends, HTTPException

from cochef.core.dependencies import get_agent, get_catalog, get_preference_store, get_sessions
from cochef.core.errors import ConversationBusyError, SessionUserMismatchError
from cochef.models.schemas import ChatMessage, ChatReply, ChatRequest, TimerStatus
from cochef.services.agent_service import ChefAgent
from cochef.services.conversation import ChatSession, SessionRegistry
from cochef.services.preferences import PreferenceStore
from cochef.services.recipe_catalog import RecipeCatalog
from cochef.tools.handlers import FunctionContext

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"]
)


def _existing_session(session_id: str, sessions: SessionRegistry) -> ChatSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return session


@router.post("/{session_id}", response_model=ChatReply)
def chat(
    session_id: str,
    request: ChatRequest,
    agent: ChefAgent = Depends(get_agent),
    sessions: SessionRegistry = Depends(get_sessions),
    catalog: RecipeCatalog = Depends(get_catalog),
    preferences: PreferenceStore = Depends(get_preference_store),
):
    """
    Sends one user message to the co-chef and returns its answer together with
    any recipes found while answering.
    """
    try:
        session = sessions.get_or_create(session_id, user_id=request.user_id)
    except SessionUserMismatchError as e:
        raise HTTPException(status_code=409, detail=str(e))

    context = FunctionContext(
        timer=session.timer,
        catalog=catalog,
        preferences=preferences,
        user_id=session.user_id,
    )

    try:
        return agent.chat_with_user(session.conversation, request.message, context)
    except ConversationBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{session_id}")
def reset_chat(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    try:
        found = sessions.reset(session_id)
    except ConversationBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not found:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return {"status": "success", "message": "Conversation cleared"}


@router.get("/{session_id}/history", response_model=list[ChatMessage])
def read_history(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    return _existing_session(session_id, sessions).conversation.messages


@router.get("/{session_id}/timer", response_model=TimerStatus)
def read_timer(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    return _existing_session(session_id, sessions).timer.status()


@router.delete("/{session_id}/timer", response_model=TimerStatus)
def hide_timer(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    timer = _existing_session(session_id, sessions).timer
    timer.hide_timer()
    return timer.status()
