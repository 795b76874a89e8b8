from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, or_, select
from storefront.database import get_session
from storefront.models.user import User
from storefront.schemas.user_schemas import UserRegister, UserLogin
from storefront.utils.hash import hash_password, verify_password
from storefront.utils.responses import success
from storefront.utils.token import create_access_token, get_current_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
        "phone": user.phone,
        "isActive": user.is_active,
        "createdAt": user.created_at,
    }


# -------- AUTH ROUTES --------

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    existing_user = session.exec(
        select(User).where(
            or_(User.email == payload.email, User.username == payload.username)
        )
    ).first()
    if existing_user:
        raise HTTPException(400, "User already exists with this email or username")

    user = User(
        username=payload.username,
        email=payload.email,
        password=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
    )

    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"Registered user {user.id} ({user.email})")

    token = create_access_token(user)
    return success(
        {"user": user_to_dict(user), "token": token},
        message="User registered successfully",
    )


@router.post("/login")
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email)).first()

    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(401, "Invalid email or password")

    if not user.is_active:
        raise HTTPException(403, "Account is disabled")

    token = create_access_token(user)
    return success({"user": user_to_dict(user), "token": token}, message="Login successful")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return success(user_to_dict(current_user))
