import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.users import router as users_router
from app.api.posts import router as posts_router
from app.core.config import LOG_LEVEL
from app.repositories.post_repository import StorageError
from app.services.validation import field_errors, error_detail

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Blog Pessoal")

# Добавляем CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Можно ограничить список доменов, если нужно
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем API-маршруты
app.include_router(users_router, prefix="/users", tags=["Пользователи"])
app.include_router(posts_router, prefix="/posts", tags=["Посты"])


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Некорректный запрос всегда 400, а не 422
    return JSONResponse(status_code=400, content={"detail": error_detail(field_errors(exc.errors()))})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"💥 {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Ошибка хранилища"})


@app.get("/")
def root():
    return {"message": "Добро пожаловать в Blog Pessoal!"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8855, reload=True)
