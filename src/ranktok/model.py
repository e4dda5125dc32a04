"""Static mapping from model names to the encoding they were trained with."""

from typing import Final

from .errors import EncodingNameError

MODEL_TO_ENCODING: Final[dict[str, str]] = {
    # gpt2
    "gpt2": "gpt2",
    # p50k_base
    "code-cushman-001": "p50k_base",
    "code-cushman-002": "p50k_base",
    "code-davinci-001": "p50k_base",
    "code-davinci-002": "p50k_base",
    "cushman-codex": "p50k_base",
    "davinci-codex": "p50k_base",
    "davinci-002": "p50k_base",
    "text-davinci-002": "p50k_base",
    "text-davinci-003": "p50k_base",
    # p50k_edit
    "code-davinci-edit-001": "p50k_edit",
    "text-davinci-edit-001": "p50k_edit",
    # r50k_base
    "ada": "r50k_base",
    "babbage": "r50k_base",
    "babbage-002": "r50k_base",
    "code-search-ada-code-001": "r50k_base",
    "code-search-babbage-code-001": "r50k_base",
    "curie": "r50k_base",
    "davinci": "r50k_base",
    "text-ada-001": "r50k_base",
    "text-babbage-001": "r50k_base",
    "text-curie-001": "r50k_base",
    "text-davinci-001": "r50k_base",
    "text-search-ada-doc-001": "r50k_base",
    "text-search-babbage-doc-001": "r50k_base",
    "text-search-curie-doc-001": "r50k_base",
    "text-search-davinci-doc-001": "r50k_base",
    "text-similarity-ada-001": "r50k_base",
    "text-similarity-babbage-001": "r50k_base",
    "text-similarity-curie-001": "r50k_base",
    "text-similarity-davinci-001": "r50k_base",
    # cl100k_base
    "gpt-3.5-turbo-instruct-0914": "cl100k_base",
    "gpt-3.5-turbo-instruct": "cl100k_base",
    "gpt-3.5-turbo-16k-0613": "cl100k_base",
    "gpt-3.5-turbo-16k": "cl100k_base",
    "gpt-3.5-turbo-0613": "cl100k_base",
    "gpt-3.5-turbo-0301": "cl100k_base",
    "gpt-3.5-turbo": "cl100k_base",
    "gpt-4-32k-0613": "cl100k_base",
    "gpt-4-32k-0314": "cl100k_base",
    "gpt-4-32k": "cl100k_base",
    "gpt-4-0613": "cl100k_base",
    "gpt-4-0314": "cl100k_base",
    "gpt-4": "cl100k_base",
    "gpt-3.5-turbo-1106": "cl100k_base",
    "gpt-35-turbo": "cl100k_base",
    "gpt-4-1106-preview": "cl100k_base",
    "gpt-4-vision-preview": "cl100k_base",
    "gpt-3.5-turbo-0125": "cl100k_base",
    "gpt-4-turbo": "cl100k_base",
    "gpt-4-turbo-2024-04-09": "cl100k_base",
    "gpt-4-turbo-preview": "cl100k_base",
    "gpt-4-0125-preview": "cl100k_base",
    "text-embedding-ada-002": "cl100k_base",
}


def list_models() -> list[str]:
    """Return all model names with a known encoding."""
    return list(MODEL_TO_ENCODING.keys())


def encoding_name_for_model(model: str) -> str:
    """
    Return the encoding name used by ``model``.

    :raises EncodingNameError: If the model is not in the table.
    """
    try:
        return MODEL_TO_ENCODING[model]
    except KeyError:
        raise EncodingNameError("unknown model name", invalid_name=model) from None
