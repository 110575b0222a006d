from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.api.deps import get_current_user_id
from finmate.core.database import get_db
from finmate.schemas.user import (
    UserRegister, UserLogin, TokenResponse, RegisterResponse, UserProfile, ProfileUpdate, AvatarResponse,
)
from finmate.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(data: UserRegister, db: AsyncSession = Depends(get_db)):
    user = await UserService.register(db, data)
    return RegisterResponse(message="User registered successfully!", userId=user.id)


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, db: AsyncSession = Depends(get_db)):
    return TokenResponse(token=await UserService.login(db, data))


@router.get("/profile", response_model=UserProfile)
async def get_profile(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    return await UserService.get_user(db, user_id)


@router.put("/profile", response_model=UserProfile)
async def update_profile(data: ProfileUpdate, user_id: int = Depends(get_current_user_id),
                         db: AsyncSession = Depends(get_db)):
    return await UserService.update_profile(db, user_id, data)


@router.patch("/avatar", response_model=AvatarResponse)
async def upload_avatar(avatar: UploadFile = File(...), user_id: int = Depends(get_current_user_id),
                        db: AsyncSession = Depends(get_db)):
    content = await avatar.read()
    url = await UserService.save_avatar(db, user_id, avatar.content_type, content)
    return AvatarResponse(avatarURL=url)
