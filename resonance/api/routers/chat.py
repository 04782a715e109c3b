import logging

from fastapi import APIRouter, Depends, HTTPException, status

from resonance.api.deps import get_controller
from resonance.controller import AppController, StateView
from resonance.errors import ChatError
from resonance.models import PostMessageResponse, SendMessageRequest

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=StateView, status_code=status.HTTP_201_CREATED)
async def open_chat(controller: AppController = Depends(get_controller)):
    """Opens a debate on the current topic; the transcript starts with the AI's opening line."""
    await controller.open_chat()
    return controller.view()


@router.post("/messages", response_model=PostMessageResponse)
async def post_message(body: SendMessageRequest, controller: AppController = Depends(get_controller)):
    if not body.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message cannot be empty")

    session = controller.session
    try:
        bot_message = await controller.send_chat_message(body.text)
    except ChatError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    # the user message is the one right before the reply
    messages = session.messages if session is not None else []
    idx = next(i for i, m in enumerate(messages) if m.id == bot_message.id)
    logging.info("Debate reply: '%s...'", bot_message.text[:50])
    return PostMessageResponse(user_message=messages[idx - 1], bot_message=bot_message)


@router.delete("", response_model=StateView)
async def close_chat(controller: AppController = Depends(get_controller)):
    controller.close_chat()
    return controller.view()
