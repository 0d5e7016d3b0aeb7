import logging

class APILogger:
    """API日志记录工具类"""

    SEPARATOR = "=" * 50

    @staticmethod
    def _format_log_data(**kwargs) -> str:
        """格式化日志数据"""
        return " | ".join(f"{k}={v}" for k, v in kwargs.items() if v is not None)

    @staticmethod
    def _get_logger() -> logging.Logger:
        """获取logger实例"""
        return logging.getLogger("api")

    @classmethod
    def _log_with_separator(cls, logger: logging.Logger, level: int, msg: str) -> None:
        """带分隔符的日志记录"""
        logger.log(level, f"\n{cls.SEPARATOR}\n{msg}\n{cls.SEPARATOR}")

    @classmethod
    def log_request(cls, operation: str, **kwargs) -> None:
        """记录请求日志"""
        log_data = cls._format_log_data(**kwargs)
        cls._log_with_separator(cls._get_logger(), logging.INFO, f"[{operation}] 请求 | {log_data}")

    @classmethod
    def log_response(cls, operation: str, **kwargs) -> None:
        """记录响应日志"""
        log_data = cls._format_log_data(**kwargs)
        cls._log_with_separator(cls._get_logger(), logging.INFO, f"[{operation}] 响应 | {log_data}")

    @classmethod
    def log_warning(cls, operation: str, message: str, **kwargs) -> None:
        """记录警告日志"""
        log_data = cls._format_log_data(**kwargs)
        cls._log_with_separator(cls._get_logger(), logging.WARNING, f"[{operation}] 警告 | {message} | {log_data}")

    @classmethod
    def log_error(cls, operation: str, error: Exception, **kwargs) -> None:
        """记录错误日志"""
        log_data = cls._format_log_data(**kwargs)
        cls._log_with_separator(cls._get_logger(), logging.ERROR, f"[{operation}] 错误 | {error!r} | {log_data}")
