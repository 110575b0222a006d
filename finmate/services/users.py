import logging
import uuid
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError

from finmate.config import settings
from finmate.core.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from finmate.core.security import hash_password, verify_password, create_access_token
from finmate.core.seed import seed_default_categories
from finmate.models.user import User
from finmate.schemas.user import UserRegister, UserLogin, ProfileUpdate

logger = logging.getLogger(__name__)

AVATAR_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class UserService:
    @staticmethod
    async def register(db: AsyncSession, data: UserRegister) -> User:
        query = select(User.id).where(or_(User.username == data.username, User.email == data.email))
        if (await db.execute(query)).first():
            raise ConflictError("Username or email already exists.")

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            full_name=data.full_name,
            date_of_birth=data.date_of_birth
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise ConflictError("Username or email already exists.") from exc
        await db.refresh(user)

        await seed_default_categories(db, user.id)
        logger.info("Registered user %s", user.id)
        return user

    @staticmethod
    async def login(db: AsyncSession, data: UserLogin) -> str:
        result = await db.execute(select(User).where(User.username == data.username.strip()))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("Account does not exist")
        if not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")
        return create_access_token(user.id)

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    async def update_profile(db: AsyncSession, user_id: int, data: ProfileUpdate) -> User:
        user = await UserService.get_user(db, user_id)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(user, field, value)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def save_avatar(db: AsyncSession, user_id: int, content_type: str | None, content: bytes) -> str:
        extension = AVATAR_EXTENSIONS.get(content_type or "")
        if extension is None:
            raise BadRequestError("Avatar must be a JPEG, PNG, WEBP or GIF image.")
        if not content:
            raise BadRequestError("No avatar file was uploaded.")

        user = await UserService.get_user(db, user_id)

        avatars_dir = Path(settings.MEDIA_DIR) / "avatars"
        avatars_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{user_id}_{uuid.uuid4().hex}{extension}"
        (avatars_dir / filename).write_bytes(content)

        user.avatar_url = f"/media/avatars/{filename}"
        await db.commit()
        logger.info("Stored avatar %s for user %s", filename, user_id)
        return user.avatar_url
