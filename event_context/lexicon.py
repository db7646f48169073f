"""Word lists and selector groups used by context scanning and scoring."""

# Text containing any of these (case-insensitive substring) is navigation or
# site chrome rather than event content.
DEFAULT_STOPWORDS: tuple[str, ...] = (
    "Cookie", "クッキー", "利用規約", "プライバシー", "著作権", "ナビゲーション",
    "メニュー", "ログイン", "購読", "シェア", "広告", "同意", "お知らせ",
    "前のページへ", "次へ", "戻る", "TOP", "トップ", "ホーム", "サイトマップ",
    "フッター", "ヘッダー", "サイドバー", "検索", "RSS",
    "Twitter", "Facebook", "Instagram", "YouTube",
    "アクセス", "会社概要", "お問い合わせ", "採用情報", "個人情報保護方針",
    "免責事項", "このサイトについて",
    "English", "日本語", "中文", "한국어", "Deutsch", "Français", "Español",
    "Italiano", "Português",
    # navigation-like labels
    "スケジュール", "チケット", "チケット情報", "予約", "購入", "申し込み",
    "詳細", "詳細情報", "一覧", "リスト", "カレンダー",
    "Calendar", "Schedule", "Ticket", "Tickets", "Information", "Info",
    "Details", "List", "More", "View",
    "すべて", "全て", "もっと見る", "続きを読む", "Read More", "View All", "See More",
)

EVENT_KEYWORDS: tuple[str, ...] = (
    "大会", "試合", "興行", "フェス", "コンサート", "イベント", "セミナー", "会議",
    "ライブ", "ショー", "発表", "展示", "祭り", "祭", "フェア", "コンペ", "カップ",
    "リーグ", "トーナメント", "選手権", "チャンピオン", "バトル", "マッチ",
    "Conference", "Live", "Show", "Event", "Match", "Battle", "Tournament",
    "記念", "周年", "Special", "Premium", "Deluxe", "Final",
)

NAVIGATION_KEYWORDS: tuple[str, ...] = (
    "ナビゲーション", "メニュー", "ヘッダー", "フッター", "サイドバー", "ログイン",
    "検索", "トップページ", "ホーム", "戻る", "次へ", "前へ",
    "Navigation", "Menu", "Header", "Footer", "Sidebar", "Login", "Search",
)

HEADING_SELECTORS: tuple[str, ...] = (
    "h1, h2, h3, h4, h5, h6",
    "[role='heading']",
    ".title, .heading",
    ".event-title, .schedule-title, .match-title, .tournament-title",
    ".card-title, .item-title",
    "[class*='title'], [class*='heading']",
    "[data-title]",
)

# Used when walking back down from the current element at each depth.
GENERIC_HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6, [role='heading'], [class*='title'], [class*='heading']"

EVENT_CONTAINER_SELECTORS: tuple[str, ...] = (
    "article", "section", ".event", ".schedule-item", ".match", ".card", ".item",
    "[class*='event']", "[class*='schedule']", "[class*='match']",
)

CONTAINER_HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6, .title, .heading, .event-title, .schedule-title, .match-title"

EMPHASIS_SELECTORS: tuple[str, ...] = (
    "strong, b, em, mark",
    ".title, .heading",
    ".event-title, .schedule-title, .match-title, .tournament-title",
    ".card-title, .item-title",
    "[class*='title'], [class*='heading']",
    "a[class*='title'], a[class*='link']",
    ".name, .event-name",
)

EMPHASIS_SCOPE_SELECTOR = "article, section, div, li, p, .event, .schedule-item, .match, .card"

DESCRIPTION_SCOPE_SELECTOR = "article, section, li, div, p"

# Heading text outside this length range is ignored.
MIN_HEADING_LENGTH = 3
MAX_HEADING_LENGTH = 200
