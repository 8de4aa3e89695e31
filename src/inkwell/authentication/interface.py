from abc import ABC, abstractmethod
from typing import Any

from .schemas import AuthenticationResult


class AuthenticationBackend(ABC):
    @abstractmethod
    def authenticate(self, *arg: Any, **kwargs: Any) -> AuthenticationResult: ...

    @abstractmethod
    def login(self, *arg: Any, **kwargs: Any) -> AuthenticationResult: ...

    @abstractmethod
    def logout(self, *arg: Any, **kwargs: Any) -> Any: ...
