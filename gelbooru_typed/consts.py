GELBOORU_API_URL = "https://gelbooru.com/index.php"
GELBOORU_POST_PAGE_URL = "https://gelbooru.org/index.php?page=post&s=view&id={id}"
GELBOORU_IMAGES_URL = "https://img3.gelbooru.com/images"
GELBOORU_THUMBNAILS_URL = "https://img3.gelbooru.com/thumbnails"
PLACEHOLDER_URL = "https://gelbooru.com/layout/404.jpg"

MAX_LIMIT = 100
DEFAULT_LIMIT = 100
DEFAULT_TIMEOUT = 30.0

RANDOM_SORT_TAG = "sort:random"
TAGS_SEPARATOR = "+"
TAG_SAFE_CHARS = ":()!*'~-_."

COMMON_QUERY = {'page': 'dapi', 'q': 'index', 'json': '1'}
