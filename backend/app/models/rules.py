# 리소스별 검증 규칙
# users / recipes (Cooking Recipes API), projects (Project Management API)

from app.core.validation import (
    ID_PATTERN,
    PASSWORD_PATTERN,
    AlphaNumeric,
    IsArray,
    IsDate,
    IsNumber,
    IsString,
    IsUrl,
    MaxBytes,
    MaxLength,
    Regex,
    Required,
    one_of,
)

_ID = [Required(), Regex(ID_PATTERN)]
# POST에서는 서버가 _id를 발급하므로 id는 선택 (주면 형식만 검사)
_OPTIONAL_ID = [Regex(ID_PATTERN)]

# 경로 파라미터
ID_RULES = {"id": _ID}
USER_ID_RULES = {"userId": _ID}
SCOPED_RECIPE_RULES = {"recipeId": _ID, "userId": _ID}

_USER_FIELDS = {
    "name": [IsString()],
    "username": [IsString(), AlphaNumeric(), MaxLength(15)],
    "password": [Required(), Regex(PASSWORD_PATTERN), MaxBytes(72)],  # bcrypt는 72바이트까지
    "sex": [IsString(), one_of("male", "female")],
    "authority": [IsString(), one_of("user", "admin")],
    "description": [IsString(), MaxLength(512)],
    "accountStatus": [IsString(), one_of("active", "suspended", "deactivated")],
    "recipes_id": [IsArray()],
}

USER_CREATE_RULES = {"id": _OPTIONAL_ID, **_USER_FIELDS}
USER_UPDATE_RULES = {"id": _ID, **_USER_FIELDS}

_RECIPE_FIELDS = {
    "name": [IsString(), MaxLength(80)],
    "shortDescription": [IsString(), MaxLength(256)],
    "cookingTime": [IsNumber()],
    "products": [IsArray()],
    "fullDescription": [IsString(), MaxLength(2048)],
    "tags": [IsArray()],
}

# 중첩 경로(/users/{userId}/recipes)는 userId를 경로에서 받는다
SCOPED_RECIPE_CREATE_RULES = {"id": _OPTIONAL_ID, **_RECIPE_FIELDS}
SCOPED_RECIPE_UPDATE_RULES = {"id": _ID, **_RECIPE_FIELDS}

# 최상위 /recipes는 바디에 소유자 userId 필수
RECIPE_CREATE_RULES = {"id": _OPTIONAL_ID, "userId": _ID, **_RECIPE_FIELDS}
RECIPE_UPDATE_RULES = {"id": _ID, "userId": _ID, **_RECIPE_FIELDS}

_PROJECT_FIELDS = {
    "date": [IsDate()],
    "authors": [Required()],
    "name": [Required()],
    "githubUrl": [IsUrl()],
    "description": [Required()],
}

PROJECT_CREATE_RULES = {"id": _OPTIONAL_ID, **_PROJECT_FIELDS}
PROJECT_UPDATE_RULES = {"id": _ID, **_PROJECT_FIELDS}
