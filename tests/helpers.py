from gradebook.models.user import User
from gradebook.core.security import create_access_token
from gradebook.utils.password import hash_password


async def make_user(db, email, role="learner", name=None, password="secret-pass"):
    user = User(email=email, name=name or email.split("@")[0], hashed_password=hash_password(password), role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}
