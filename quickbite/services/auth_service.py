import logging

from tortoise import connections
from tortoise.exceptions import IntegrityError

from quickbite.core.errors import DuplicateEmail, InvalidCredentials, ValidationFailed
from quickbite.core.security import create_access_token, hash_password, verify_password
from quickbite.models.user import User, UserRole
from quickbite.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _issue(user: User) -> AuthResponse:
    token = create_access_token(user.id, user.role.value, user.email)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


class AuthService:
    """Registration and login; produces the bearer tokens the API authenticates with."""

    def __init__(self, connection_name: str = "default"):
        self.connection_name = connection_name

    async def register(self, req: RegisterRequest) -> AuthResponse:
        email = req.email.strip().lower()
        if not req.name.strip() or not email or not req.password:
            raise ValidationFailed("name, email and password are required")
        if "@" not in email:
            raise ValidationFailed("email is not valid")
        if len(req.password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        try:
            role = UserRole(req.role or UserRole.CUSTOMER.value)
        except ValueError:
            raise ValidationFailed("role must be customer or restaurant_owner")

        conn = connections.get(self.connection_name)
        if await User.filter(email=email).using_db(conn).exists():
            raise DuplicateEmail()
        try:
            user = await User.create(
                name=req.name.strip(),
                email=email,
                password_hash=hash_password(req.password),
                phone=req.phone.strip(),
                role=role,
                using_db=conn,
            )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            raise DuplicateEmail()

        log.info("User %s registered as %s", user.id, role.value)
        return _issue(user)

    async def login(self, req: LoginRequest) -> AuthResponse:
        email = req.email.strip().lower()
        user = await User.get_or_none(email=email).using_db(connections.get(self.connection_name))
        if not user or not verify_password(user.password_hash, req.password):
            log.warning("Failed login attempt for %s", email)
            raise InvalidCredentials()
        return _issue(user)
