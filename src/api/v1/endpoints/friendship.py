from typing import List
from fastapi import APIRouter, Depends, HTTPException, Body
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_session
from src.core.schemas.friendship import (
    SendFriendshipRequest, AnswerFriendshipRequest,
    FriendshipResponse, FriendRequestResponse, MessageResponse
)
from src.core.services.friendship import FriendshipService
from src.core.auth import get_current_user
from src.core.utils.logger import APILogger

router = APIRouter()

async def can_send_friendship_request(
    request: SendFriendshipRequest = Body(...),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
) -> SendFriendshipRequest:
    """发送好友请求前置守卫：目标用户必须存在且不是自己"""
    try:
        await FriendshipService(db).ensure_can_send(current_user["id"], request.friend_user_id)
    except ValueError as e:
        APILogger.log_warning(
            "发送好友请求",
            "守卫拒绝",
            用户ID=current_user["id"],
            目标用户ID=request.friend_user_id,
            错误信息=str(e)
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        APILogger.log_error("发送好友请求", e, 用户ID=current_user["id"])
        raise HTTPException(status_code=500, detail=f"发送好友请求失败: {str(e)}")
    return request

async def can_answer_friendship_request(
    request: AnswerFriendshipRequest = Body(...),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
) -> AnswerFriendshipRequest:
    """处理好友请求前置守卫：必须有对方发来的待处理请求"""
    try:
        await FriendshipService(db).ensure_can_answer(current_user["id"], request.friend_user_id)
    except ValueError as e:
        APILogger.log_warning(
            "处理好友请求",
            "守卫拒绝",
            用户ID=current_user["id"],
            对方用户ID=request.friend_user_id,
            错误信息=str(e)
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        APILogger.log_error("处理好友请求", e, 用户ID=current_user["id"])
        raise HTTPException(status_code=500, detail=f"处理好友请求失败: {str(e)}")
    return request

@router.post("/requests", response_model=MessageResponse)
async def send_friend_request(
    request: SendFriendshipRequest = Depends(can_send_friendship_request),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
):
    """发送好友请求"""
    try:
        APILogger.log_request(
            "发送好友请求",
            用户ID=current_user["id"],
            目标用户ID=request.friend_user_id
        )

        service = FriendshipService(db)
        await service.send_request(current_user["id"], request.friend_user_id)

        APILogger.log_response(
            "发送好友请求",
            用户ID=current_user["id"],
            操作结果="成功",
            目标用户ID=request.friend_user_id
        )

        return {"message": "好友请求已发送"}
    except ValueError as e:
        APILogger.log_warning(
            "发送好友请求",
            "请求失败",
            用户ID=current_user["id"],
            目标用户ID=request.friend_user_id,
            错误信息=str(e)
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        APILogger.log_error(
            "发送好友请求",
            e,
            用户ID=current_user["id"],
            目标用户ID=request.friend_user_id
        )
        raise HTTPException(status_code=500, detail=f"发送好友请求失败: {str(e)}")

@router.put("/requests/accept", response_model=MessageResponse)
async def accept_friend_request(
    request: AnswerFriendshipRequest = Depends(can_answer_friendship_request),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
):
    """接受好友请求"""
    try:
        APILogger.log_request(
            "接受好友请求",
            用户ID=current_user["id"],
            对方用户ID=request.friend_user_id
        )

        service = FriendshipService(db)
        updated = await service.accept_request(current_user["id"], request.friend_user_id)

        APILogger.log_response(
            "接受好友请求",
            用户ID=current_user["id"],
            操作结果="成功",
            对方用户ID=request.friend_user_id,
            更新行数=updated
        )

        return {"message": "已接受好友请求"}
    except Exception as e:
        APILogger.log_error(
            "接受好友请求",
            e,
            用户ID=current_user["id"],
            对方用户ID=request.friend_user_id
        )
        raise HTTPException(status_code=500, detail=f"接受好友请求失败: {str(e)}")

@router.put("/requests/decline", response_model=MessageResponse)
async def decline_friend_request(
    request: AnswerFriendshipRequest = Depends(can_answer_friendship_request),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
):
    """拒绝好友请求"""
    try:
        APILogger.log_request(
            "拒绝好友请求",
            用户ID=current_user["id"],
            对方用户ID=request.friend_user_id
        )

        service = FriendshipService(db)
        updated = await service.decline_request(current_user["id"], request.friend_user_id)

        APILogger.log_response(
            "拒绝好友请求",
            用户ID=current_user["id"],
            操作结果="成功",
            对方用户ID=request.friend_user_id,
            更新行数=updated
        )

        return {"message": "已拒绝好友请求"}
    except ValueError as e:
        APILogger.log_warning(
            "拒绝好友请求",
            "请求失败",
            用户ID=current_user["id"],
            对方用户ID=request.friend_user_id,
            错误信息=str(e)
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        APILogger.log_error(
            "拒绝好友请求",
            e,
            用户ID=current_user["id"],
            对方用户ID=request.friend_user_id
        )
        raise HTTPException(status_code=500, detail=f"拒绝好友请求失败: {str(e)}")

@router.get("/requests", response_model=List[FriendRequestResponse])
async def get_friend_requests(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
):
    """获取收到的好友请求列表"""
    try:
        APILogger.log_request("获取好友请求列表", 用户ID=current_user["id"])

        service = FriendshipService(db)
        requests = await service.get_friend_requests(current_user["id"])

        APILogger.log_response(
            "获取好友请求列表",
            用户ID=current_user["id"],
            返回记录数=len(requests)
        )

        return requests
    except Exception as e:
        APILogger.log_error("获取好友请求列表", e, 用户ID=current_user["id"])
        raise HTTPException(status_code=500, detail=f"获取好友请求列表失败: {str(e)}")

@router.get("", response_model=List[FriendshipResponse])
async def get_friends(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
):
    """获取好友列表"""
    try:
        APILogger.log_request("获取好友列表", 用户ID=current_user["id"])

        service = FriendshipService(db)
        friendships = await service.get_friends(current_user["id"])

        APILogger.log_response(
            "获取好友列表",
            用户ID=current_user["id"],
            返回记录数=len(friendships)
        )

        return friendships
    except Exception as e:
        APILogger.log_error("获取好友列表", e, 用户ID=current_user["id"])
        raise HTTPException(status_code=500, detail=f"获取好友列表失败: {str(e)}")
