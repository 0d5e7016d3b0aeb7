import asyncio
from src.core.database import engine, Base
from src.core.models import User, Friendship  # noqa: F401 注册模型

async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print("数据表创建完成！")

if __name__ == "__main__":
    asyncio.run(init_db())
