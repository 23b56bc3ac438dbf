# 컬렉션 인덱스 생성
# 앱 스타트업에서 한 번 ensure_*_indexes(db)를 await로 호출한다.


async def ensure_cooking_indexes(db):
    # 중첩 경로 조회/삭제: {_id, userId}
    await db["recipes"].create_index("userId")
    await db["recipes"].create_index([("tags", 1)])
    # username은 unique 아님 (중복 검사는 범위 밖)
    await db["users"].create_index("username")


async def ensure_project_indexes(db):
    await db["projects"].create_index("name")
