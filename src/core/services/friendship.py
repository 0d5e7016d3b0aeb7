from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List, Optional
from uuid import UUID
import logging

from sqlalchemy import Select, select, update, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.models.friendship import Friendship, FriendshipStatus
from src.core.models.user import User

logger = logging.getLogger(__name__)


class FriendshipError(ValueError):
    """好友请求客户端错误基类"""


class InvalidTargetError(FriendshipError):
    """目标用户不存在或为自己"""


class NotRequestedError(FriendshipError):
    """不存在待处理的好友请求"""


class AlreadyRequestedError(FriendshipError):
    """已发送过好友请求或已是好友"""


async def guard(db: AsyncSession, stmt: Select, error: FriendshipError) -> None:
    """前置守卫：查询不到匹配记录时抛出指定错误"""
    result = await db.execute(stmt.limit(1))
    if result.first() is None:
        raise error


class FriendshipService:
    """好友请求服务"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """事务范围：成功提交，任何异常回滚后继续抛出"""
        try:
            yield self.db
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def ensure_can_send(self, user_id: UUID, friend_user_id: UUID) -> None:
        """发送好友请求的守卫"""
        if user_id == friend_user_id:
            raise InvalidTargetError("不能向自己发送好友请求")

        await guard(
            self.db,
            select(User.id).where(
                and_(
                    User.id == friend_user_id,
                    User.is_deleted == False
                )
            ),
            InvalidTargetError("目标用户不存在"),
        )

    async def ensure_can_answer(self, user_id: UUID, friend_user_id: UUID) -> None:
        """接受/拒绝好友请求的守卫：必须有对方发来的待处理请求"""
        await guard(
            self.db,
            select(Friendship.id).where(
                and_(
                    Friendship.user_id == friend_user_id,
                    Friendship.friend_user_id == user_id,
                    Friendship.status == FriendshipStatus.REQUESTED
                )
            ).with_for_update(),
            NotRequestedError("好友请求不存在或已被处理"),
        )

    async def _get_directed(self, user_id: UUID, friend_user_id: UUID) -> Optional[Friendship]:
        result = await self.db.execute(
            select(Friendship).where(
                and_(
                    Friendship.user_id == user_id,
                    Friendship.friend_user_id == friend_user_id
                )
            )
        )
        return result.scalar_one_or_none()

    async def _answer_inbound(
        self, user_id: UUID, friend_user_id: UUID, status: FriendshipStatus
    ) -> int:
        """将对方发来的待处理请求更新为指定状态，返回受影响行数"""
        result = await self.db.execute(
            update(Friendship)
            .where(
                and_(
                    Friendship.user_id == friend_user_id,
                    Friendship.friend_user_id == user_id,
                    Friendship.status == FriendshipStatus.REQUESTED
                )
            )
            .values(status=status, update_time=datetime.now())
        )
        return result.rowcount

    async def _accept_reverse(self, user_id: UUID, friend_user_id: UUID) -> None:
        """接受后补全反向记录：已存在则置为accepted，否则新建"""
        reverse = await self._get_directed(user_id, friend_user_id)
        if reverse is None:
            self.db.add(Friendship(
                user_id=user_id,
                friend_user_id=friend_user_id,
                status=FriendshipStatus.ACCEPTED,
                create_time=datetime.now(),
                update_time=datetime.now()
            ))
            await self.db.flush()
            return

        if reverse.status == FriendshipStatus.DECLINED:
            logger.warning(
                f"反向记录曾被拒绝，将直接置为accepted - user_id: {user_id}, "
                f"friend_user_id: {friend_user_id}"
            )
        reverse.status = FriendshipStatus.ACCEPTED
        reverse.update_time = datetime.now()
        await self.db.flush()

    async def send_request(self, user_id: UUID, friend_user_id: UUID) -> None:
        """发送好友请求，被拒绝过的请求重新置为requested"""
        async with self._transaction():
            existing = await self._get_directed(user_id, friend_user_id)
            if existing is None:
                self.db.add(Friendship(
                    user_id=user_id,
                    friend_user_id=friend_user_id,
                    status=FriendshipStatus.REQUESTED,
                    create_time=datetime.now(),
                    update_time=datetime.now()
                ))
            elif existing.status == FriendshipStatus.DECLINED:
                existing.status = FriendshipStatus.REQUESTED
                existing.update_time = datetime.now()
            elif existing.status == FriendshipStatus.ACCEPTED:
                raise AlreadyRequestedError("已经是好友关系")
            else:
                raise AlreadyRequestedError("已存在待处理的好友请求")

        logger.info(f"好友请求已发送 - user_id: {user_id}, friend_user_id: {friend_user_id}")

    async def accept_request(self, user_id: UUID, friend_user_id: UUID) -> int:
        """
        接受好友请求

        在同一个事务中：
        1. 将对方发来的请求置为accepted
        2. 反向记录存在（双方互相发过请求）则同样置为accepted，否则新建一条accepted记录

        返回第1步受影响的行数，请求已被处理时为0
        """
        async with self._transaction():
            updated = await self._answer_inbound(user_id, friend_user_id, FriendshipStatus.ACCEPTED)
            await self._accept_reverse(user_id, friend_user_id)

        logger.info(
            f"好友请求已接受 - user_id: {user_id}, friend_user_id: {friend_user_id}, 更新行数: {updated}"
        )
        return updated

    async def decline_request(self, user_id: UUID, friend_user_id: UUID) -> int:
        """拒绝好友请求，只修改对方发来的那条记录"""
        async with self._transaction():
            updated = await self._answer_inbound(user_id, friend_user_id, FriendshipStatus.DECLINED)
            if updated == 0:
                raise NotRequestedError("好友请求不存在或已被处理")

        logger.info(
            f"好友请求已拒绝 - user_id: {user_id}, friend_user_id: {friend_user_id}, 更新行数: {updated}"
        )
        return updated

    async def get_friend_requests(self, user_id: UUID) -> List[Friendship]:
        """获取收到的待处理好友请求"""
        result = await self.db.execute(
            select(Friendship)
            .where(
                and_(
                    Friendship.friend_user_id == user_id,
                    Friendship.status == FriendshipStatus.REQUESTED
                )
            )
            .order_by(desc(Friendship.create_time))
        )
        requests = result.scalars().all()

        # 批量获取发送者信息
        sender_ids = [request.user_id for request in requests]
        users = await self._get_users(sender_ids)

        for request in requests:
            sender = users.get(request.user_id)
            if sender:
                request.sender_nickname = sender.nickname

        return requests

    async def get_friends(self, user_id: UUID) -> List[Friendship]:
        """获取好友列表"""
        result = await self.db.execute(
            select(Friendship)
            .where(
                and_(
                    Friendship.user_id == user_id,
                    Friendship.status == FriendshipStatus.ACCEPTED
                )
            )
            .order_by(desc(Friendship.update_time))
        )
        friendships = result.scalars().all()

        friend_ids = [friendship.friend_user_id for friendship in friendships]
        users = await self._get_users(friend_ids)

        # 添加好友昵称和头像信息
        for friendship in friendships:
            friend = users.get(friendship.friend_user_id)
            if friend:
                friendship.friend_nickname = friend.nickname
                friendship.friend_avatar = friend.avatar

        return friendships

    async def _get_users(self, user_ids: List[UUID]) -> dict:
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User).where(User.id.in_(user_ids))
        )
        return {user.id: user for user in result.scalars().all()}
