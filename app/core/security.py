import jwt
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from app.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_HOURS

# bcrypt для паролей авторов блога
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def issue_token(email: str, expires_delta: timedelta | None = None) -> str:
    """
    Выдаёт bearer-токен автору. В "sub" лежит email,
    срок жизни по умолчанию ACCESS_TOKEN_EXPIRE_HOURS.
    """
    now = datetime.now(timezone.utc)
    claims = {
        "sub": email,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def read_token_subject(token: str) -> str | None:
    """Email из токена или None, если токен просрочен, подделан или без "sub"."""
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], options={"require": ["exp", "sub"]})
    except jwt.PyJWTError:
        return None
    return claims["sub"]
