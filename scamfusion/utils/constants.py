"""
ScamFusion Constants - Central location for keyword tables, domain lists and
structural pattern definitions.

Numeric thresholds that operators may want to tune live in ``config.Settings``;
the values here are the vocabularies the scorers match against.
"""

from typing import Dict, List, Tuple

# APPLICATION INFO
APP_NAME: str = "ScamFusion"
APP_DESCRIPTION: str = "On-device financial scam signal fusion engine"

# LIMITS
MAX_TEXT_LENGTH: int = 5000
MAX_URLS_PER_TEXT: int = 20
MAX_REASON_EXAMPLES: int = 3
RECENT_CONTEXT_LINES: int = 10
MAX_URL_LENGTH: int = 150
MAX_URL_SPECIAL_CHARS: int = 5

# SEVERITY TIERS
TIER_CRITICAL: str = "critical"
TIER_HIGH: str = "high"
TIER_MEDIUM: str = "medium"

TIER_LABELS: Dict[str, str] = {
    TIER_CRITICAL: "매우 위험",
    TIER_HIGH: "위험",
    TIER_MEDIUM: "의심",
}

# =============================================================================
# WEIGHTED KEYWORDS
# tier -> category -> keywords. Keywords are matched against text with all
# whitespace removed and case folded, so they are written without spaces.
# =============================================================================

WEIGHTED_KEYWORDS: Dict[str, Dict[str, List[str]]] = {
    TIER_CRITICAL: {
        # Direct demands for money
        "trade_fraud": [
            "계좌번호알려주", "계좌번호보내", "입금해주", "송금해주", "이체해주",
            "선입금", "선결제", "선지급", "보증금입금", "착불결제",
        ],
        # Pressure to act immediately
        "unknown": [
            "급하게필요", "긴급송금", "지금당장", "빨리입금", "즉시송금",
            "오늘안에", "1시간이내", "30분이내",
        ],
        # Credential harvesting
        "phishing": [
            "인증번호알려", "otp번호", "보안카드번호", "비밀번호알려", "공인인증서",
            "카드번호알려", "cvc번호", "cvv번호", "유효기간알려",
        ],
        # Threats in the name of an authority
        "impersonation": [
            "체포영장", "구속영장", "압수수색", "벌금납부", "과태료납부",
            "검찰청에서", "경찰청에서", "금감원에서", "국세청에서", "법원에서",
        ],
    },
    TIER_HIGH: {
        "loan": [
            "급전", "돈필요", "빌려주세요", "대출", "현금대출", "무담보대출",
            "신용대출", "소액대출", "당일대출", "즉시대출", "무서류대출",
            "돈빌려", "급하게돈",
        ],
        "trade_fraud": [
            "계좌번호", "송금", "입금", "이체", "무통장입금", "현금입금",
            "송금확인", "입금확인", "이체확인", "계좌확인", "입금계좌",
            "대포폰", "대포통장", "명의대여", "계좌대여", "법인통장",
            "휴대폰개통", "휴대폰대납", "카드대납",
        ],
        "unknown": [
            "급하게",
            "사랑해요", "보고싶어요", "결혼하고싶어", "만나고싶어",
            "항공권비용", "비자비용", "병원비", "수술비",
            "외국에있는데", "해외출장중",
        ],
        "phishing": [
            "인증번호", "otp", "보안카드", "비밀번호", "개인정보확인",
            "신분증사진", "신분증촬영", "통장사본", "주민번호",
            "본인확인", "계정잠금", "비밀번호변경", "로그인실패",
        ],
        "impersonation": [
            "경찰청", "검찰청", "금융감독원", "금감원", "국세청", "관세청",
            "법원", "행정안전부", "국민연금", "건강보험공단",
            "우체국", "국민건강보험", "사이버수사대",
        ],
        "investment": [
            "원금보장", "수익보장", "고수익", "단기수익", "확실한수익",
            "비트코인투자", "코인투자", "해외선물", "fx마진", "주식리딩",
            "리딩방", "시그널방", "vip방", "수익인증",
            "이더리움", "도지코인", "nft", "에어드랍",
            "채굴", "지갑주소", "코인지갑", "바이낸스",
        ],
    },
    TIER_MEDIUM: {
        "unknown": [
            "당첨", "환급", "환불", "보상금", "지원금", "장려금",
            "무료증정", "무료지급", "무료제공",
            "축하합니다", "행운의주인공", "추첨결과",
            "문자확인", "링크클릭", "앱설치", "프로그램설치", "원격제어",
            "팀뷰어", "애니데스크", "화면공유", "비밀보장", "절대비밀",
        ],
        "impersonation": [
            "체포", "구속", "영장", "벌금", "과태료", "고소", "고발",
            "소송", "법적조치", "강제집행", "압류", "연체",
            "긴급재난지원금", "소상공인지원", "청년지원금", "복지급여",
            "정부지원", "지원대상자", "신청기한",
        ],
        "trade_fraud": [
            "선구매", "선예약", "한정수량", "파격할인",
            "반값", "90%할인", "거의공짜",
            "직거래안됨", "택배만가능", "물건보내드림",
            "택배발송", "택배비", "추가배송비", "배송비결제", "배송대행",
            "반품비용", "교환비용", "착불비",
            "배송조회", "배송실패", "주소확인",
        ],
        "investment": [
            "재택알바", "고수익알바", "간단한알바", "쉬운알바", "누구나가능",
            "통장만있으면", "신분증만있으면", "휴대폰만있으면",
            "일당", "주급", "간단업무", "투잡",
        ],
        "phishing": [
            "계정복구", "계정잠김", "로그인시도", "의심스러운활동",
            "카카오계정", "네이버계정",
        ],
    },
}

# Semantic markers for the urgency + money + credential combination.
# Matched against detected keyword identifiers.
URGENCY_MARKERS: Tuple[str, ...] = ("급하", "빨리", "즉시", "긴급", "지금당장", "오늘안에", "이내")
MONEY_MARKERS: Tuple[str, ...] = ("급전", "송금", "입금", "이체", "계좌", "선결제", "선지급", "대출", "돈")
CREDENTIAL_MARKERS: Tuple[str, ...] = ("인증", "otp", "비밀번호", "보안카드", "카드번호", "cvc", "cvv")

# Markers searched in raw text for the fusion-level urgency + money + URL bonus
FUSION_URGENCY_MARKERS: Tuple[str, ...] = ("긴급", "급하", "빨리", "지금당장", "지금 바로", "오늘안에")
FUSION_MONEY_MARKERS: Tuple[str, ...] = ("입금", "송금", "계좌", "선입금", "대출", "급전")

# =============================================================================
# STRUCTURAL PATTERNS
# (name, regex, weight, reason, category)
# Evaluated against the original (un-normalized) text.
# =============================================================================

STRUCTURAL_PATTERNS: List[Tuple[str, str, float, str, str]] = [
    (
        "resident_id",
        r"(?<!\d)\d{6}-?[1-4]\d{6}(?!\d)",
        0.4, "주민등록번호 패턴", "phishing",
    ),
    (
        "passport_number",
        r"(?<![A-Za-z0-9])[A-Z]{1,2}\d{7,8}(?!\d)",
        0.3, "여권번호 패턴", "phishing",
    ),
    (
        "account_number",
        r"(?<![\d-])(?:\d{3,4}-\d{2,6}-\d{4,7}|\d{6}-\d{2}-\d{6}|\d{3}-\d{4}-\d{4}-\d{2}|\d{10,14})(?![\d-])",
        0.2, "계좌번호 형식", "trade_fraud",
    ),
    (
        "phone_number",
        r"(?<!\d)(?:01[016789]-?\d{3,4}-?\d{4}|02-?\d{3,4}-?\d{4}|0[3-6]\d-?\d{3,4}-?\d{4}"
        r"|1[5689]\d{2}-?\d{4}|050\d-?\d{3,4}-?\d{4}|\+82-?1?0?-?\d{4}-?\d{4})(?!\d)",
        0.15, "전화번호 형식", "unknown",
    ),
    (
        "money_amount",
        r"\d{1,3}(?:,\d{3})+\s?원|\d+\s?만\s?원",
        0.15, "금액 표시", "trade_fraud",
    ),
    (
        "shortened_url",
        r"(?:https?://)?(?:bit\.ly|goo\.gl|tinyurl\.com|t\.co|is\.gd|v\.gd|ow\.ly|buff\.ly|han\.gl|me2\.do|url\.kr)/\S+",
        0.25, "단축 URL", "phishing",
    ),
    (
        "suspicious_tld_url",
        r"https?://\S*\.(?:tk|ml|ga|cf|gq|xyz|top|work|click|link|online)(?:/\S*)?(?![a-z])",
        0.3, "무료/의심 도메인 URL", "phishing",
    ),
    (
        "ip_url",
        r"https?://\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}(?::\d+)?(?:/\S*)?",
        0.35, "IP 직접 접근 URL", "phishing",
    ),
    (
        "crypto_wallet",
        r"(?<![A-Za-z0-9])(?:0x[a-fA-F0-9]{40}|bc1[a-z0-9]{25,39}|[13][a-km-zA-HJ-NP-Z1-9]{25,34})(?![A-Za-z0-9])",
        0.3, "가상화폐 지갑 주소", "investment",
    ),
]

# Normalized account-shaped values starting like this are phone numbers
PHONE_PREFIX_EXCLUSION: str = r"^(?:01[016789]|02|0[3-6]\d)"

# =============================================================================
# URL ANALYSIS
# =============================================================================

SUSPICIOUS_TLDS: List[str] = [
    "tk", "ml", "ga", "cf", "gq",
    "top", "xyz", "club", "work", "click",
    "loan", "men", "icu", "win", "bid",
    "link", "online", "site", "buzz", "rest",
]

SHORTENER_DOMAINS: List[str] = [
    "bit.ly", "goo.gl", "tinyurl.com", "ow.ly", "t.co",
    "is.gd", "v.gd", "buff.ly", "adf.ly", "cutt.ly", "rb.gy",
    "url.kr", "han.gl", "me2.do", "vo.la",
]

PHISHING_URL_KEYWORDS: List[str] = [
    "login", "signin", "account", "secure", "verify",
    "update", "confirm", "banking", "payment", "wallet",
    "security", "suspended", "locked", "unusual",
    "gift", "prize", "winner", "claim", "bonus",
]

# Brands commonly impersonated in Korean financial phishing.
BRAND_TARGETS: Dict[str, Dict] = {
    "kb": {
        "name": "KB국민은행",
        "keywords": ["kbstar", "kookmin", "kbcard"],
        "legitimate_domains": ["kbstar.com", "kbcard.com", "kbfg.com"],
    },
    "shinhan": {
        "name": "신한은행",
        "keywords": ["shinhan"],
        "legitimate_domains": ["shinhan.com", "shinhansec.com", "shinhancard.com"],
    },
    "woori": {
        "name": "우리은행",
        "keywords": ["woori"],
        "legitimate_domains": ["wooribank.com", "wooricard.com", "woorifg.com"],
    },
    "hana": {
        "name": "하나은행",
        "keywords": ["hanabank", "hanacard", "hanafn"],
        "legitimate_domains": ["hanabank.com", "hanafn.com", "hanacard.co.kr"],
    },
    "nonghyup": {
        "name": "NH농협",
        "keywords": ["nonghyup", "nhbank"],
        "legitimate_domains": ["nonghyup.com", "nhcard.com"],
    },
    "ibk": {
        "name": "IBK기업은행",
        "keywords": ["ibk"],
        "legitimate_domains": ["ibk.co.kr"],
    },
    "kakaobank": {
        "name": "카카오뱅크",
        "keywords": ["kakaobank"],
        "legitimate_domains": ["kakaobank.com"],
    },
    "kbank": {
        "name": "케이뱅크",
        "keywords": ["kbank"],
        "legitimate_domains": ["kbanknow.com"],
    },
    "toss": {
        "name": "토스뱅크",
        "keywords": ["tossbank"],
        "legitimate_domains": ["tossbank.com", "toss.im"],
    },
}

# URL check contributions
URL_SCORE_FREE_TLD: float = 0.4
URL_SCORE_SHORTENER: float = 0.3
URL_SCORE_PHISHING_KEYWORD: float = 0.25
URL_SCORE_BRAND_SPOOF: float = 0.5
URL_SCORE_IP_HOST: float = 0.35
URL_SCORE_LONG_URL: float = 0.2
URL_SCORE_SPECIAL_CHARS: float = 0.2

# =============================================================================
# REGISTRIES
# =============================================================================

# Phone registry
PHONE_SUSPICIOUS_PREFIXES: Tuple[str, ...] = ("070", "050")
PHONE_SCORE_REGISTERED: float = 0.9
PHONE_SCORE_VOICE_PHISHING: float = 0.21
PHONE_SCORE_SMS_PHISHING: float = 0.18
PHONE_SCORE_MULTIPLE_REPORTS: float = 0.3
PHONE_SCORE_SUSPICIOUS_PREFIX: float = 0.2
PHONE_MULTIPLE_REPORTS: int = 5

PHONE_PATTERNS: List[str] = [
    r"(?<!\d)01[016789]-?\d{3,4}-?\d{4}(?!\d)",
    r"(?<!\d)02-?\d{3,4}-?\d{4}(?!\d)",
    r"(?<!\d)0[3-6]\d-?\d{3,4}-?\d{4}(?!\d)",
    r"(?<!\d)1[5689]\d{2}-?\d{4}(?!\d)",
    r"(?<!\d)070-?\d{3,4}-?\d{4}(?!\d)",
    r"(?<!\d)050\d-?\d{3,4}-?\d{4}(?!\d)",
    r"\+82-?1?0?-?\d{4}-?\d{4}(?!\d)",
]

# Account registry
ACCOUNT_SCORE_REGISTERED: float = 0.95
ACCOUNT_SCORE_MULTIPLE_REPORTS: float = 0.3
ACCOUNT_FRAUD_THRESHOLD: int = 3
ACCOUNT_MULTIPLE_REPORTS: int = 5
ACCOUNT_MIN_DIGITS: int = 10
ACCOUNT_MAX_DIGITS: int = 14

ACCOUNT_PATTERNS: List[str] = [
    r"(?<![\d-])\d{3,4}-\d{2,6}-\d{4,7}(?![\d-])",
    r"(?<![\d-])\d{6}-\d{2}-\d{6}(?![\d-])",
    r"(?<![\d-])\d{3}-\d{4}-\d{4}-\d{2}(?![\d-])",
    r"(?<![\d-])\d{10,14}(?![\d-])",
]

PHONE_REGISTRY_INIT_PATH: str = "/phishing/searchPhone.do"
PHONE_REGISTRY_SEARCH_PATH: str = "/phishing/searchPhoneAjax.do"
ACCOUNT_REGISTRY_INIT_PATH: str = "/www/security/cyber/cyber04.jsp"
ACCOUNT_REGISTRY_SEARCH_PATH: str = "/user/cyber/fraud.do"

REGISTRY_HEADERS: Dict[str, str] = {
    "X-Requested-With": "XMLHttpRequest",
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "User-Agent": "Mozilla/5.0 (Linux; Android 10) AppleWebKit/537.36 (KHTML, like Gecko) Mobile Safari/537.36",
}

# =============================================================================
# SECONDARY MODEL
# =============================================================================

CHATML_START: str = "<|im_start|>"
CHATML_END: str = "<|im_end|>"

MODEL_CATEGORY_LABELS: Dict[str, str] = {
    "투자": "investment",
    "중고": "trade_fraud",
    "거래": "trade_fraud",
    "피싱": "phishing",
    "사칭": "impersonation",
    "대출": "loan",
    "정상": "safe",
}

# Reason-text fallback categorizer (checked in order)
REASON_CATEGORY_HINTS: List[Tuple[str, Tuple[str, ...]]] = [
    ("investment", ("투자", "수익", "코인", "주식")),
    ("trade_fraud", ("입금", "선결제", "거래", "택배")),
    ("phishing", ("URL", "링크", "피싱")),
    ("impersonation", ("사칭", "기관")),
    ("loan", ("대출",)),
]
