"""User-facing messages returned by the API and shown by the client."""

REGISTER_OK = "注册成功"
REGISTER_FAILED = "注册失败"
LOGIN_OK = "登录成功"
LOGIN_FAILED = "登录失败"
CREDENTIALS_REQUIRED = "用户名和密码不能为空"
USERNAME_LENGTH = "用户名长度应为{min}-{max}个字符"
PASSWORD_LENGTH = "密码长度至少为{min}位"
PASSWORD_MISMATCH = "两次输入的密码不一致"
USER_EXISTS = "用户名已存在"
USER_NOT_FOUND = "用户不存在"
WRONG_PASSWORD = "密码错误"

UNAUTHORIZED = "未授权访问"
TOKEN_INVALID = "令牌无效或已过期"
DATA_INVALID = "数据格式无效"
DATE_INVALID = "日期无效"
DATA_SAVED = "数据保存成功"
FETCH_FAILED = "获取数据失败"
SAVE_FAILED = "保存数据失败"

NOT_FOUND = "Not found"
INTERNAL = "Internal server error"

NETWORK_ERROR = "网络错误，请检查连接"
SYNCING = "正在同步数据..."
SYNC_OK = "数据已同步"
SYNC_FAILED = "同步失败，使用本地数据"
IMPORT_INVALID = "导入失败：文件格式不正确"
