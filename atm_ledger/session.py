"""
Session Module

Tracks who is logged in and enforces the login-attempt limit. This is the
only place lockout policy lives.

States:
    LOGGED_OUT --successful attempt--> LOGGED_IN
    LOGGED_OUT --failed attempt, limit reached--> LOCKED (until now + lockout)
    LOCKED --deadline passes--> LOGGED_OUT, attempt counter reset
    LOGGED_IN --logout--> LOGGED_OUT, attempt counter reset

Attempts made while LOCKED are rejected without consulting the directory.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional, Tuple
import threading

from .accounts import Account
from .audit import AuditTrail, AuditEventType
from .config import get_config
from .directory import Directory
from .errors import AccountLocked, AuthenticationFailed
from .logging_config import get_logger, log_action

logger = get_logger("atm_ledger.session")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(Enum):
    """Authenticator states"""
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"
    LOCKED = "locked"


class Authenticator:
    """
    Login session over a directory with attempt counting and timed lockout
    """

    def __init__(
        self,
        directory: Directory,
        max_attempts: Optional[int] = None,
        lockout_duration: Optional[timedelta] = None,
        clock: Optional[Clock] = None,
        audit_trail: Optional[AuditTrail] = None
    ):
        config = get_config()
        if max_attempts is None:
            max_attempts = config.max_login_attempts
        if lockout_duration is None:
            lockout_duration = timedelta(seconds=config.lockout_seconds)
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if lockout_duration < timedelta(0):
            raise ValueError("lockout_duration cannot be negative")

        self.directory = directory
        self.max_attempts = max_attempts
        self.lockout_duration = lockout_duration
        self._clock = clock or utc_now
        self._audit_trail = audit_trail if audit_trail is not None else directory.audit_trail
        self._lock = threading.RLock()

        self._current: Optional[Account] = None
        self._failed_attempts = 0
        self._locked_until: Optional[datetime] = None

    @property
    def state(self) -> SessionState:
        with self._lock:
            self._expire_lockout(self._clock())
            if self._locked_until is not None:
                return SessionState.LOCKED
            if self._current is not None:
                return SessionState.LOGGED_IN
            return SessionState.LOGGED_OUT

    @property
    def is_logged_in(self) -> bool:
        return self.state == SessionState.LOGGED_IN

    @property
    def current_account(self) -> Optional[Account]:
        with self._lock:
            return self._current

    @property
    def current_account_id(self) -> Optional[str]:
        account = self.current_account
        return account.id if account else None

    @property
    def failed_attempts(self) -> int:
        with self._lock:
            self._expire_lockout(self._clock())
            return self._failed_attempts

    @property
    def remaining_attempts(self) -> int:
        return max(0, self.max_attempts - self.failed_attempts)

    @property
    def locked_until(self) -> Optional[datetime]:
        with self._lock:
            self._expire_lockout(self._clock())
            return self._locked_until

    def attempt(self, account_id: str, credential: str) -> Optional[Account]:
        """
        Try to log in

        Returns:
            The account on success; None if the credentials were wrong or
            the session is locked
        """
        account, _ = self._attempt(account_id, credential)
        return account

    def login(self, account_id: str, credential: str) -> Account:
        """
        Log in or raise

        Raises:
            AccountLocked: If the session is locked out
            AuthenticationFailed: If the id or credential is wrong
        """
        account, locked_until = self._attempt(account_id, credential)
        if locked_until is not None:
            raise AccountLocked(locked_until)
        if account is None:
            raise AuthenticationFailed()
        return account

    def logout(self) -> None:
        """End the current session and reset the attempt counter"""
        with self._lock:
            account = self._current
            self._current = None
            self._failed_attempts = 0

        if account is not None:
            log_action(logger, "info", "Logged out", account_id=account.id, action="logout")
            if self._audit_trail:
                self._audit_trail.log_event(AuditEventType.LOGOUT, account.id)

    def _attempt(self, account_id: str,
                 credential: str) -> Tuple[Optional[Account], Optional[datetime]]:
        """Returns (account or None, lockout deadline if rejected for being locked)"""
        with self._lock:
            now = self._clock()
            self._expire_lockout(now)

            if self._locked_until is not None:
                log_action(logger, "warning", "Login rejected: session locked",
                           account_id=account_id, action="login",
                           extra={"locked_until": self._locked_until.isoformat()})
                return None, self._locked_until

            if self._current is not None:
                self.logout()

            account = self.directory.authenticate(account_id, credential)
            if account is not None:
                self._current = account
                self._failed_attempts = 0
                log_action(logger, "info", "Login succeeded",
                           account_id=account.id, action="login")
                if self._audit_trail:
                    self._audit_trail.log_event(AuditEventType.LOGIN_SUCCESS, account.id)
                return account, None

            self._failed_attempts += 1
            log_action(logger, "warning", "Login failed",
                       account_id=account_id, action="login",
                       extra={"failed_attempts": self._failed_attempts})
            if self._audit_trail:
                self._audit_trail.log_event(
                    AuditEventType.LOGIN_FAILED, account_id,
                    {"failed_attempts": self._failed_attempts}
                )

            if self._failed_attempts >= self.max_attempts:
                self._locked_until = now + self.lockout_duration
                log_action(logger, "warning", "Too many failed attempts, login locked",
                           account_id=account_id, action="lockout",
                           extra={"locked_until": self._locked_until.isoformat()})
                if self._audit_trail:
                    self._audit_trail.log_event(
                        AuditEventType.LOGIN_LOCKED, account_id,
                        {"locked_until": self._locked_until.isoformat()}
                    )
            return None, None

    def _expire_lockout(self, now: datetime) -> None:
        """Leave LOCKED once the deadline has passed. Caller holds the lock."""
        if self._locked_until is not None and now >= self._locked_until:
            self._locked_until = None
            self._failed_attempts = 0
