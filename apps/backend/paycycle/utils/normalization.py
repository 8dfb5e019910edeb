"""
정규화 유틸리티 함수

빠른 입력 문자열과 해시태그 키워드를 정규화하여 매칭 정확도를 높입니다.
"""

import re
import unicodedata


def normalize_with_offsets(value: str | None) -> tuple[str, list[int]]:
    """
    매칭용 NFKC 정규화 + 원문 위치 매핑

    문자 단위로 NFKC 를 적용하고, 정규화 결과의 각 문자가 원문의 몇 번째
    문자에서 왔는지를 함께 반환합니다. 파서는 정규화된 문자열로 매칭하고
    설명(description)은 이 매핑으로 원문에서 잘라냅니다.

    Example:
        >>> normalize_with_offsets("９원")
        ('9원', [0, 1])
        >>> normalize_with_offsets("㈜")
        ('(주)', [0, 0, 0])
    """
    if not value:
        return "", []

    chars: list[str] = []
    offsets: list[int] = []
    for index, ch in enumerate(value):
        normalized = unicodedata.normalize("NFKC", ch)
        chars.append(normalized)
        offsets.extend([index] * len(normalized))
    return "".join(chars), offsets


def collapse_whitespace(value: str | None) -> str:
    """
    연속 공백(전각 공백 포함)을 하나로 축약하고 앞뒤 공백 제거

    Example:
        >>> collapse_whitespace("  점심　 ㈜한빛  ")
        "점심 ㈜한빛"
    """
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def normalize_keyword(value: str | None) -> str:
    """
    해시태그/키워드 비교용 정규화

    - NFKC 정규화
    - 소문자 변환 (casefold)

    Example:
        >>> normalize_keyword("Income")
        "income"
    """
    if not value:
        return ""
    return unicodedata.normalize("NFKC", value).casefold()
