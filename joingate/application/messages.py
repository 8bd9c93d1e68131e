"""User-facing message catalog.

Every message shown to a user (chat replies and callback pages) comes from
here, in the configured locale.
"""

from typing import Literal

from joingate.domain.value import FailureReason

Locale = Literal["en", "zh"]

_CATALOG: dict[str, dict[str, str]] = {
    "en": {
        "start": "Hi! Send a join request to the group and I will help you verify.",
        "challenge": (
            "Hello {name}!\n\n"
            "To join the group, please verify your forum account first:\n"
            "🔗 Tap the button below and authorize the application.\n"
            "If the forum shows you a key instead of redirecting, copy it and send it to me here.\n"
            "⏰ This link expires in {minutes} minutes.\n"
            "✅ Once verified, your join request is approved automatically."
        ),
        "challenge_button": "🚀 Verify now",
        "group_notice": "{name} asked to join; a verification link has been sent.",
        "approved": "Verification succeeded, welcome to the group!",
        "approved_as": "Verification succeeded as {username}, welcome to the group!",
        "failure_prefix": "Verification failed: {reason}",
        "page_failed_title": "Verification failed",
        "page_success_title": "Verification succeeded",
        "page_success_body": "Your join request has been approved. You can return to Telegram.",
        "page_debug": "Debug information",
        "page_index_title": "Forum verification service",
        "page_index_body": "Endpoints served by this bot:",
        "missing_payload": "No verification payload was received.",
        "internal_error": "Something went wrong on our side. Please try again later.",
        FailureReason.DECRYPTION_FAILED.value: (
            "the key could not be decrypted. Please copy the whole key and try again."
        ),
        FailureReason.MALFORMED_PAYLOAD.value: (
            "the key has an unexpected format. Please request a new link."
        ),
        FailureReason.NONCE_MISMATCH.value: (
            "this key was issued for a different verification request."
        ),
        FailureReason.EXPIRED_OR_UNKNOWN_NONCE.value: (
            "the verification link expired or was already used. "
            "Please send a new join request."
        ),
        FailureReason.VERIFICATION_FAILED.value: (
            "the forum did not accept the key. Please try again."
        ),
        FailureReason.APPROVAL_FAILED.value: (
            "your account was verified but the join request could not be approved. "
            "Please contact an admin."
        ),
    },
    "zh": {
        "start": "你好！向群组发送加群申请后，我会引导你完成验证。",
        "challenge": (
            "你好 {name}！\n\n"
            "要加入群组，请先完成论坛身份验证：\n"
            "🔗 点击下方按钮并授权应用。\n"
            "如果论坛显示了密钥而没有跳转，请将其复制并回复给我。\n"
            "⏰ 此链接将在 {minutes} 分钟后过期。\n"
            "✅ 验证通过后，你的加群申请将自动被批准。"
        ),
        "challenge_button": "🚀 立即验证",
        "group_notice": "{name} 申请加群，已经发送了验证链接",
        "approved": "验证成功！已加群！",
        "approved_as": "验证成功（{username}）！已加群！",
        "failure_prefix": "验证失败：{reason}",
        "page_failed_title": "认证失败",
        "page_success_title": "认证成功",
        "page_success_body": "您已成功加群，可以返回 Telegram。",
        "page_debug": "调试信息",
        "page_index_title": "论坛认证服务",
        "page_index_body": "可用端点：",
        "missing_payload": "未收到有效的认证负载",
        "internal_error": "服务器内部错误，请稍后再试。",
        FailureReason.DECRYPTION_FAILED.value: "解密失败，请复制完整的密钥后重试。",
        FailureReason.MALFORMED_PAYLOAD.value: "密钥格式不正确，请重新申请链接。",
        FailureReason.NONCE_MISMATCH.value: "该密钥属于另一个验证请求。",
        FailureReason.EXPIRED_OR_UNKNOWN_NONCE.value: "登录超时或链接已被使用，请重新发送加群申请。",
        FailureReason.VERIFICATION_FAILED.value: "论坛未接受该密钥，您似乎无权访问此内容，请重试。",
        FailureReason.APPROVAL_FAILED.value: "身份已验证，但加群申请未能批准，请联系管理员。",
    },
}


class Messages:
    """Message catalog bound to one locale."""

    def __init__(self, locale: Locale = "en") -> None:
        self.locale = locale
        self._texts = _CATALOG[locale]

    def text(self, key: str, **kwargs: object) -> str:
        """Look up and format a message.

        Raises:
            KeyError: If the key is not in the catalog
        """
        return self._texts[key].format(**kwargs)

    def failure(self, reason: FailureReason) -> str:
        """Explanation of a failed verification, with prefix."""
        return self.text("failure_prefix", reason=self._texts[reason.value])
