"""
服务结果 - 值或错误列表加一条提示信息
"""

from typing import Any, List, Optional


class StatusGeneric:
    """
    服务调用结果

    Attributes:
        errors: 错误信息列表
        result: 成功时的返回值
        message: 成功时为设置的提示信息，有错误时为 "Failed with N error(s)"
    """

    DEFAULT_MESSAGE = 'Success'

    def __init__(self, result: Any = None, message: Optional[str] = None):
        self.errors: List[str] = []
        self.result = result
        self._message = message or self.DEFAULT_MESSAGE

    def __repr__(self):
        return f"<StatusGeneric valid={self.is_valid} message={self.message!r}>"

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        if self.has_errors:
            count = len(self.errors)
            return f"Failed with {count} error{'s' if count > 1 else ''}"
        return self._message

    @message.setter
    def message(self, value: str):
        self._message = value

    def add_error(self, error: str) -> 'StatusGeneric':
        """添加错误，有错误时 result 无效"""
        self.errors.append(error)
        self.result = None
        return self

    def set_result(self, result: Any) -> 'StatusGeneric':
        if self.is_valid:
            self.result = result
        return self

    def combine_statuses(self, status: 'StatusGeneric') -> 'StatusGeneric':
        """合并另一个结果的错误，无错误时沿用其提示信息"""
        if status.has_errors:
            for error in status.errors:
                self.add_error(error)
        elif self.is_valid and status._message != self.DEFAULT_MESSAGE:
            self._message = status._message
        return self

    def get_all_errors(self, separator: str = '\n') -> Optional[str]:
        """所有错误信息拼成一个字符串，没有错误时为 None"""
        if not self.errors:
            return None
        return separator.join(self.errors)
