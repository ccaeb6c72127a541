"""
Phrase tables for generated text (reasons, profile summaries, suggestions).

Keys are language-independent; each ``Language`` has one table.  Reason
phrases are joined with the per-language ``separator`` entry.

    phrase(Language.EN, "reason.risk", band=label(Language.EN, "risk_band", "balanced"))
    -> "Matches your balanced risk appetite"
"""

from __future__ import annotations

import logging

from sustain_advisor.taxonomy.assessment_taxonomy import Language

log = logging.getLogger(__name__)

_PHRASES: dict[Language, dict[str, str]] = {
    Language.EN: {
        "separator":            "; ",
        "reason.risk":          "Matches your {band} risk appetite",
        "reason.time":          "Suits {band} investment planning",
        "reason.esg":           "Closely aligned with the {dimension} issues you care about",
        "reason.sdg":           "Contributes to your prioritized sustainability goals",
        "reason.fallback":      "Has strong investment potential",
        "profile.summary":      "You are a {investor_type} with a {horizon} investment outlook.",
        "strength.esg":         "Strong conviction on {dimension} issues",
        "strength.sdg":         "Clear sustainability priorities (SDG {sdgs})",
        "strength.horizon":     "Long investment horizon that can ride out market cycles",
        "strength.confidence":  "Consistent, well-articulated risk preferences",
        "watch.bias":           "Watch for {bias} ({strength})",
        "watch.mismatch":       "High risk appetite paired with a short investment horizon",
        "sdg.explanation":      "These Sustainable Development Goals closely reflect your values.",
        "opening.question": (
            "Hello! I'm the Sustainable Investment Assistant, and I'm delighted to help "
            "you explore suitable investment directions. Before we begin, I'd like to "
            "understand your background. Do you have any previous investment experience? "
            "Could you briefly share your investment history?"
        ),
    },
    Language.ZH: {
        "separator":            "，",
        "reason.risk":          "符合你的{band}型風險偏好",
        "reason.time":          "適合{band}投資規劃",
        "reason.esg":           "與你重視的{dimension}議題高度契合",
        "reason.sdg":           "直接貢獻你關注的永續發展目標",
        "reason.fallback":      "具有良好的投資潛力",
        "profile.summary":      "你是一位{investor_type}，具有{horizon}投資視野。",
        "strength.esg":         "對{dimension}議題有明確的堅持",
        "strength.sdg":         "永續發展目標優先順序清楚（SDG {sdgs}）",
        "strength.horizon":     "投資期限長，能承受市場循環",
        "strength.confidence":  "風險偏好一致且表達清楚",
        "watch.bias":           "留意{bias}傾向（{strength}）",
        "watch.mismatch":       "風險偏好高但投資期限短",
        "sdg.explanation":      "這些永續發展目標與你的價值觀高度契合",
        "opening.question": (
            "你好！我是永續投資助手，很高興能協助你探索適合的投資方向。"
            "在開始之前，我想先了解一下，你過去有投資經驗嗎？"
            "可以簡單分享一下你的投資背景嗎？"
        ),
    },
}

_LABELS: dict[Language, dict[str, dict[str, str]]] = {
    Language.EN: {
        "risk_band": {
            "aggressive":           "aggressive",
            "balanced":             "balanced",
            "conservative_leaning": "conservative-leaning",
            "conservative":         "conservative",
        },
        "investor_type": {
            "aggressive":           "aggressive investor",
            "balanced":             "balanced investor",
            "conservative_leaning": "conservative-leaning investor",
            "conservative":         "conservative investor",
        },
        "time_band": {
            "long":   "long-term",
            "medium": "medium-term",
            "short":  "short-term",
        },
        "esg_dimension": {
            "E": "environmental",
            "S": "social",
            "G": "governance",
        },
        "bias": {
            "loss_aversion":  "loss aversion",
            "overconfidence": "overconfidence",
            "herding":        "herding",
            "anchoring":      "anchoring",
            "confirmation":   "confirmation bias",
            "recency":        "recency bias",
        },
        "bias_strength": {
            "low":    "low",
            "medium": "medium",
            "high":   "high",
        },
        "bias_suggestion": {
            "loss_aversion": (
                "Set a long-term allocation in advance so short-term losses "
                "don't trigger panic selling."
            ),
            "overconfidence": (
                "Diversify across tracks and cap any single position to limit "
                "the cost of being wrong."
            ),
            "herding": (
                "Check whether a popular theme still fits your own goals before "
                "following the crowd."
            ),
            "anchoring": (
                "Re-evaluate positions on current fundamentals rather than your "
                "purchase price."
            ),
            "confirmation": (
                "Actively look for evidence against your thesis before adding "
                "to a position."
            ),
            "recency": (
                "Look at performance over full market cycles, not just the last "
                "few months."
            ),
        },
    },
    Language.ZH: {
        "risk_band": {
            "aggressive":           "積極",
            "balanced":             "平衡",
            "conservative_leaning": "穩健",
            "conservative":         "保守",
        },
        "investor_type": {
            "aggressive":           "積極型投資人",
            "balanced":             "平衡型投資人",
            "conservative_leaning": "穩健型投資人",
            "conservative":         "保守型投資人",
        },
        "time_band": {
            "long":   "長期",
            "medium": "中期",
            "short":  "短期",
        },
        "esg_dimension": {
            "E": "環境",
            "S": "社會",
            "G": "治理",
        },
        "bias": {
            "loss_aversion":  "損失厭惡",
            "overconfidence": "過度自信",
            "herding":        "從眾效應",
            "anchoring":      "錨定效應",
            "confirmation":   "確認偏誤",
            "recency":        "近因偏誤",
        },
        "bias_strength": {
            "low":    "低",
            "medium": "中",
            "high":   "高",
        },
        "bias_suggestion": {
            "loss_aversion":  "事先設定長期資產配置，避免短期虧損引發恐慌性賣出。",
            "overconfidence": "分散投資於不同賽道，並限制單一部位的比重。",
            "herding":        "跟隨熱門題材前，先確認是否符合自己的目標。",
            "anchoring":      "以當前基本面重新評估持股，而非買入價格。",
            "confirmation":   "加碼前主動尋找與自己觀點相反的證據。",
            "recency":        "觀察完整市場循環的表現，而非僅看最近幾個月。",
        },
    },
}


def resolve_language(value: object) -> Language:
    """Map a language code to ``Language``; unknown codes fall back to English."""
    if isinstance(value, Language):
        return value
    try:
        return Language(str(value).lower())
    except ValueError:
        log.warning("Unsupported language %r — falling back to 'en'.", value)
        return Language.EN


def phrase(language: Language | str, key: str, **fields: object) -> str:
    """Render phrase ``key`` in ``language`` with ``str.format`` fields."""
    return _PHRASES[resolve_language(language)][key].format(**fields)


def label(language: Language | str, group: str, key: str) -> str:
    """Look up a display label, e.g. ``label(EN, "time_band", "long")``."""
    return _LABELS[resolve_language(language)][group][key]
