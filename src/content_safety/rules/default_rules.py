"""Built-in rule packs.

The banned-phrase defaults are the minimal set used whenever no rule file
can be resolved. Persona rules have no external source and are versioned
with the package.
"""

from ..models import BannedPhraseRule, PersonaRule, Severity

DEFAULT_BANNED_PHRASE_RULES: tuple[BannedPhraseRule, ...] = (
    BannedPhraseRule(pattern="完治", suggestion="改善が期待される"),
    BannedPhraseRule(pattern="治る|治ります", suggestion="サポートする"),
    BannedPhraseRule(pattern="即効", suggestion="実感には個人差があります"),
    BannedPhraseRule(pattern="副作用(は|が)?(一切)?(ない|ありません|なし)", suggestion="体質に合わない場合は使用を中止してください"),
    BannedPhraseRule(pattern="(絶対|必ず)痩せる", suggestion="健康的な体づくりをサポート"),
    BannedPhraseRule(pattern="100%(安全|効果)", suggestion="品質管理を徹底"),
)

PERSONA_TAGS: tuple[str, ...] = (
    "pregnancy",
    "lactation",
    "medication",
    "stimulant-sensitivity",
    "underage",
    "elderly",
)

DEFAULT_PERSONA_RULES: tuple[PersonaRule, ...] = (
    # Pregnancy
    PersonaRule(
        id="pregnancy-caffeine",
        persona_tag="pregnancy",
        ingredient_pattern="カフェイン|caffeine",
        severity=Severity.HIGH,
        message="妊娠中はカフェインの摂取に注意が必要です",
        recommended_action="医師に相談してください",
    ),
    PersonaRule(
        id="pregnancy-vitamin-a",
        persona_tag="pregnancy",
        ingredient_pattern="ビタミンA|レチノール|vitamin a|retinol",
        severity=Severity.HIGH,
        message="妊娠中は過剰なビタミンA摂取は避けてください",
        recommended_action="医師に相談してください",
    ),
    PersonaRule(
        id="pregnancy-herbs",
        persona_tag="pregnancy",
        ingredient_pattern="セントジョーンズワート|聖ヨハネ草|st john|エキナセア|echinacea",
        severity=Severity.MID,
        message="妊娠中は一部のハーブサプリメントの使用に注意が必要です",
        recommended_action="使用前に医師に相談してください",
    ),
    # Lactation
    PersonaRule(
        id="lactation-herbs",
        persona_tag="lactation",
        ingredient_pattern="セントジョーンズワート|聖ヨハネ草|st john",
        severity=Severity.MID,
        message="授乳中は一部のハーブが母乳に影響する可能性があります",
        recommended_action="使用前に医師に相談してください",
    ),
    PersonaRule(
        id="lactation-caffeine",
        persona_tag="lactation",
        ingredient_pattern="カフェイン|caffeine",
        severity=Severity.MID,
        message="授乳中のカフェイン摂取は適量に留めてください",
        recommended_action="1日200mg以下に制限することをお勧めします",
    ),
    # Medication interactions
    PersonaRule(
        id="medication-vitamin-k",
        persona_tag="medication",
        ingredient_pattern="ビタミンK|vitamin k|ワルファリン|warfarin",
        severity=Severity.HIGH,
        message="服薬中の方は成分の相互作用にご注意ください",
        recommended_action="医師または薬剤師に相談してください",
    ),
    PersonaRule(
        id="medication-ginkgo",
        persona_tag="medication",
        ingredient_pattern="イチョウ葉|ginkgo|銀杏",
        severity=Severity.MID,
        message="血液凝固に影響する薬剤との相互作用の可能性があります",
        recommended_action="医師または薬剤師に相談してください",
    ),
    # Stimulant sensitivity (shared message, merged by the aggregator)
    PersonaRule(
        id="stimulant-caffeine",
        persona_tag="stimulant-sensitivity",
        ingredient_pattern="カフェイン|caffeine",
        severity=Severity.MID,
        message="刺激物に敏感な方は注意が必要な成分が含まれています",
        recommended_action="少量から始めることをお勧めします",
    ),
    PersonaRule(
        id="stimulant-theanine",
        persona_tag="stimulant-sensitivity",
        ingredient_pattern="テアニン|theanine|ガラナ|guarana",
        severity=Severity.MID,
        message="刺激物に敏感な方は注意が必要な成分が含まれています",
        recommended_action="少量から始めることをお勧めします",
    ),
    PersonaRule(
        id="stimulant-taurine",
        persona_tag="stimulant-sensitivity",
        ingredient_pattern="タウリン|taurine",
        severity=Severity.LOW,
        message="刺激物に敏感な方は注意が必要な成分が含まれています",
        recommended_action="体調に注意して摂取してください",
    ),
    # Age groups
    PersonaRule(
        id="underage-caffeine",
        persona_tag="underage",
        ingredient_pattern="カフェイン|caffeine|ガラナ|guarana",
        severity=Severity.HIGH,
        message="未成年の方は刺激性成分を含む製品の摂取を控えてください",
        recommended_action="保護者や医師に相談してください",
    ),
    PersonaRule(
        id="elderly-vitamin-k",
        persona_tag="elderly",
        ingredient_pattern="ビタミンK|vitamin k|イチョウ葉|ginkgo",
        severity=Severity.MID,
        message="高齢の方は服用中の薬との飲み合わせにご注意ください",
        recommended_action="かかりつけ医に相談してください",
    ),
)
