"""115 endpoints and protocol constants."""
from typing import Final, Tuple

# NOTE: 115 Browser UA; some signed URLs are bound to the UA used for signing
UA_115_BROWSER: Final = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36 115Browser/27.0.3.7"
)

FILE_LIST_LIMIT: Final = 1000

APP_VERSION_FALLBACK: Final = "27.0.3.7"
APP_VERSION_PLATFORM: Final = "win"

DEFAULT_QRCODE_APP: Final = "web"

# Login devices accepted by the QR login endpoint
QRCODE_APPS: Final[Tuple[str, ...]] = (
    "web", "ios", "115ios", "android", "115android", "115ipad", "tv", "qandroid",
    "windows", "mac", "linux", "wechatmini", "alipaymini", "harmony",
)

API_LOGIN_CHECK: Final = "https://passportapi.115.com/app/1.0/web/1.0/check/sso"
API_QRCODE_LOGIN: Final = "https://passportapi.115.com/app/1.0/{app}/1.0/login/qrcode/"
API_QRCODE_TOKEN: Final = "https://qrcodeapi.115.com/api/1.0/web/1.0/token/"
API_QRCODE_STATUS: Final = "https://qrcodeapi.115.com/get/status/"

API_FILE_LIST: Final = "https://webapi.115.com/files"
API_DOWNLOAD_URL: Final = "https://proapi.115.com/app/chrome/downurl"

API_APP_VERSION: Final = "https://appversion.115.com/1/web/1.0/api/chrome"
API_UPLOAD_INFO: Final = "https://proapi.115.com/app/uploadinfo"
API_UPLOAD_INIT: Final = "https://uplb.115.com/4.0/initupload.php"

# initupload.php status values
UPLOAD_STATUS_MUST_UPLOAD: Final = 1
UPLOAD_STATUS_ACCEPTED: Final = 2
UPLOAD_STATUS_SIGN_CHECK: Final = 7
