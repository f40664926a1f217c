# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
deepl-client - asynchronous client for the DeepL translation API.

Translates texts and documents, reports usage statistics and lists the
supported languages. Document translation is driven through the
upload, poll and download workflow of the service.
"""

__version__ = "0.5.0"

from deepl_client.client import DEEPL_API_FREE, DEEPL_API_PRO, DeepLClient
from deepl_client.errors import (
    AuthorizationError,
    DeepLConnectionError,
    DeepLError,
    DocumentTranslationError,
    InternalServerError,
    InvalidParametersError,
    PayloadTooLargeError,
    QuotaExceededError,
    RateLimitError,
    ResourceNotFoundError,
    ServiceUnavailableError,
    UnknownDeepLError,
    UrlTooLongError,
)
from deepl_client.languages import Language, get_source_language_code, get_target_language_code
from deepl_client.models import (
    DocumentStatus,
    DocumentTranslation,
    Formality,
    Splitting,
    SupportedLanguage,
    Translation,
    TranslationState,
    UsageStatistics,
    XmlHandling,
)

__all__ = [
    "AuthorizationError",
    "DEEPL_API_FREE",
    "DEEPL_API_PRO",
    "DeepLClient",
    "DeepLConnectionError",
    "DeepLError",
    "DocumentStatus",
    "DocumentTranslation",
    "DocumentTranslationError",
    "Formality",
    "InternalServerError",
    "InvalidParametersError",
    "Language",
    "PayloadTooLargeError",
    "QuotaExceededError",
    "RateLimitError",
    "ResourceNotFoundError",
    "ServiceUnavailableError",
    "Splitting",
    "SupportedLanguage",
    "Translation",
    "TranslationState",
    "UnknownDeepLError",
    "UrlTooLongError",
    "UsageStatistics",
    "XmlHandling",
    "__version__",
    "get_source_language_code",
    "get_target_language_code",
]
