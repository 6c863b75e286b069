# petgroom/core/screens.py
"""
클라이언트 화면 집합 정의.

로그인/로그아웃 시 역할에 따라 활성 화면 집합이 바뀝니다.
화면 이동은 (화면, 선택적 payload) 값으로 표현하며, 문자열 비교 대신 Enum을 사용합니다.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from petgroom.core.security import SessionContext
from petgroom.models.profile import UserRole


class Screen(Enum):
    LOGIN = "LOGIN"
    HOME = "HOME"
    BOOKING = "BOOKING"
    MY_APPOINTMENTS = "MY_APPOINTMENTS"
    PROFILE = "PROFILE"
    PET_REGISTRATION = "PET_REGISTRATION"
    ADMIN_DASHBOARD = "ADMIN_DASHBOARD"
    ADMIN_AGENDA = "ADMIN_AGENDA"
    ADMIN_SERVICES = "ADMIN_SERVICES"
    ADMIN_SETTINGS = "ADMIN_SETTINGS"


CLIENT_SCREENS: FrozenSet[Screen] = frozenset({
    Screen.HOME,
    Screen.BOOKING,
    Screen.MY_APPOINTMENTS,
    Screen.PROFILE,
    Screen.PET_REGISTRATION,
})

ADMIN_SCREENS: FrozenSet[Screen] = frozenset({
    Screen.ADMIN_DASHBOARD,
    Screen.ADMIN_AGENDA,
    Screen.ADMIN_SERVICES,
    Screen.ADMIN_SETTINGS,
})


@dataclass(frozen=True)
class Navigation:
    """이동할 화면과 함께 전달되는 대상 ID (예: 수정할 반려동물, 예약할 서비스)."""
    screen: Screen
    payload: Optional[str] = None


def screens_for(role: UserRole) -> FrozenSet[Screen]:
    return ADMIN_SCREENS if role == UserRole.ADMIN else CLIENT_SCREENS


def home_screen(role: UserRole) -> Screen:
    return Screen.ADMIN_DASHBOARD if role == UserRole.ADMIN else Screen.HOME


def resolve(session: Optional[SessionContext], navigation: Navigation) -> Navigation:
    """
    세션 상태에 맞게 이동 요청을 보정합니다.
    - 세션이 없으면 LOGIN
    - 역할의 화면 집합 밖이면 (LOGIN 포함) 역할의 홈 화면
    """
    if session is None:
        return Navigation(Screen.LOGIN)
    if navigation.screen not in screens_for(session.role):
        return Navigation(home_screen(session.role))
    return navigation
