from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

from src.core.models.friendship import FriendshipStatus

class FriendshipRequestInput(BaseModel):
    """好友请求操作入参（发送、接受、拒绝共用）"""
    friend_user_id: UUID = Field(..., alias="friendUserId", description="对方用户ID")

    class Config:
        extra = "forbid"  # 只允许声明的字段

class SendFriendshipRequest(FriendshipRequestInput):
    """发送好友请求"""
    pass

class AnswerFriendshipRequest(FriendshipRequestInput):
    """接受或拒绝好友请求"""
    pass

class FriendshipInDB(BaseModel):
    """数据库中的有向好友记录"""
    id: UUID = Field(..., description="主键ID")
    user_id: UUID = Field(..., description="用户ID")
    friend_user_id: UUID = Field(..., description="对方用户ID")
    status: FriendshipStatus = Field(..., description="记录状态")
    create_time: datetime = Field(..., description="创建时间")
    update_time: datetime = Field(..., description="更新时间")

    class Config:
        from_attributes = True

class FriendshipResponse(FriendshipInDB):
    """好友关系响应"""
    friend_nickname: str | None = Field(None, description="好友昵称")
    friend_avatar: str | None = Field(None, description="好友头像")

class FriendRequestResponse(FriendshipInDB):
    """收到的好友请求响应"""
    sender_nickname: str | None = Field(None, description="发送者昵称")

class MessageResponse(BaseModel):
    """操作结果响应"""
    message: str = Field(..., description="响应消息")
