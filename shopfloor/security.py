"""安全模块：用户密码哈希与校验

- 使用 Passlib 管理密码哈希，新密码采用 pbkdf2_sha256，兼容历史 bcrypt 哈希。
- bcrypt 有 72 字节限制，哈希前截断，避免工牌号等长口令导致运行时错误。
"""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

BCRYPT_MAX_BYTES = 72


def _truncate(password) -> str:
    if isinstance(password, bytes):
        pw_bytes = password
    else:
        pw_bytes = password.encode('utf-8')
    if len(pw_bytes) > BCRYPT_MAX_BYTES:
        return pw_bytes[:BCRYPT_MAX_BYTES].decode('utf-8', errors='ignore')
    return pw_bytes.decode('utf-8', errors='ignore')


def get_password_hash(password: str) -> str:
    """对明文密码进行哈希并返回哈希字符串"""
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证明文密码与哈希是否匹配；哈希格式无法识别时视为验证失败"""
    try:
        return pwd_context.verify(_truncate(plain_password), hashed_password)
    except (ValueError, TypeError):
        return False


def password_needs_rehash(hashed_password: str) -> bool:
    """历史 bcrypt 哈希在下次登录成功时升级为 pbkdf2_sha256"""
    return pwd_context.needs_update(hashed_password)
