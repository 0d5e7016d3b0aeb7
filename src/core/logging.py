import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from config.settings import settings

# 创建日志目录
log_dir = Path(settings.LOG_DIR)
log_dir.mkdir(parents=True, exist_ok=True)

# 配置日志格式
log_format = logging.Formatter(settings.LOG_FORMAT)


def _file_handler(filename: str, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=log_dir / filename,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    handler.setFormatter(log_format)
    handler.setLevel(level)
    return handler


# 创建控制台处理器
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(log_format)
console_handler.setLevel(settings.LOG_LEVEL)

# 配置根日志记录器
root_logger = logging.getLogger()
root_logger.setLevel(settings.LOG_LEVEL)
root_logger.addHandler(_file_handler("debug.log", logging.DEBUG))
root_logger.addHandler(_file_handler("api.log", logging.INFO))
root_logger.addHandler(_file_handler("error.log", logging.ERROR))
root_logger.addHandler(console_handler)

# 配置特定模块的日志级别
logging.getLogger("uvicorn").setLevel(logging.INFO)
logging.getLogger("uvicorn.access").setLevel(logging.INFO)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
