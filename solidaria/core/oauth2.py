from fastapi.security import OAuth2PasswordBearer

# Reads the bearer token from the Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
