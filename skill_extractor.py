# skill_extractor.py
import re
import logging
from typing import Dict, List, Set

logger = logging.getLogger(__name__)

_SKILL_GROUPS = (
    # Programming languages
    ('Python', 'Java', 'JavaScript', 'TypeScript', 'C++', 'C#', 'PHP', 'Ruby', 'Go', 'Rust',
     'Swift', 'Kotlin', 'Scala', 'R', 'MATLAB', 'Perl', 'Objective-C', 'Dart', 'Elixir'),
    # Frontend
    ('React', 'Angular', 'Vue', 'Vue.js', 'Svelte', 'Next.js', 'Nuxt.js', 'Gatsby',
     'HTML', 'HTML5', 'CSS', 'CSS3', 'SASS', 'SCSS', 'LESS', 'Tailwind CSS', 'Bootstrap',
     'Material UI', 'Chakra UI', 'Ant Design', 'jQuery', 'Webpack', 'Vite', 'Babel',
     'Redux', 'MobX', 'Zustand', 'Recoil', 'Context API'),
    # Backend
    ('Node.js', 'Express', 'Express.js', 'Django', 'Flask', 'FastAPI', 'Spring', 'Spring Boot',
     '.NET', '.NET Core', 'ASP.NET', 'Laravel', 'Symfony', 'Ruby on Rails', 'Sinatra',
     'NestJS', 'Koa', 'Hapi', 'Fastify'),
    # Databases
    ('SQL', 'MySQL', 'PostgreSQL', 'MongoDB', 'Redis', 'Cassandra', 'Oracle', 'SQL Server',
     'MariaDB', 'SQLite', 'DynamoDB', 'Elasticsearch', 'Neo4j', 'CouchDB', 'Firebase',
     'Supabase', 'PlanetScale', 'Fauna', 'NoSQL'),
    # Cloud & DevOps
    ('AWS', 'Azure', 'GCP', 'Google Cloud', 'Docker', 'Kubernetes', 'Jenkins', 'GitLab CI',
     'GitHub Actions', 'CircleCI', 'Travis CI', 'Terraform', 'Ansible', 'Chef', 'Puppet',
     'CloudFormation', 'CI/CD', 'DevOps', 'Linux', 'Unix', 'Bash'),
    # AWS services
    ('Lambda', 'S3', 'EC2', 'ECS', 'EKS', 'RDS', 'CloudFront', 'Route 53',
     'API Gateway', 'SQS', 'SNS', 'CloudWatch', 'IAM', 'VPC', 'Elastic Beanstalk'),
    # Data science & ML
    ('Machine Learning', 'Deep Learning', 'AI', 'Artificial Intelligence', 'Data Science',
     'TensorFlow', 'PyTorch', 'Keras', 'Scikit-learn', 'Pandas', 'NumPy', 'SciPy',
     'Matplotlib', 'Seaborn', 'NLP', 'Computer Vision', 'OpenCV', 'NLTK', 'spaCy'),
    # Testing
    ('Jest', 'Mocha', 'Chai', 'Jasmine', 'Cypress', 'Selenium', 'Playwright', 'Puppeteer',
     'JUnit', 'pytest', 'unittest', 'TestNG', 'Karma', 'Enzyme'),
    # Mobile
    ('React Native', 'Flutter', 'iOS', 'Android', 'Xamarin', 'Ionic'),
    # Version control & collaboration
    ('Git', 'GitHub', 'GitLab', 'Bitbucket', 'SVN', 'Mercurial', 'Jira', 'Confluence',
     'Trello', 'Asana', 'Slack'),
    # APIs & protocols
    ('REST', 'REST API', 'RESTful', 'GraphQL', 'gRPC', 'SOAP', 'WebSocket', 'Socket.io',
     'JSON', 'XML', 'Microservices', 'API Design'),
    # Design & UI/UX
    ('UI/UX', 'Figma', 'Sketch', 'Adobe XD', 'Photoshop', 'Illustrator', 'InVision',
     'Zeplin', 'Responsive Design', 'Web Design'),
    # Methodologies
    ('Agile', 'Scrum', 'Kanban', 'Waterfall', 'TDD', 'BDD', 'DDD', 'SOLID'),
    # Other
    ('Blockchain', 'Web3', 'Solidity', 'Smart Contracts', 'Ethereum', 'Big Data',
     'Hadoop', 'Spark', 'Kafka', 'RabbitMQ', 'Nginx', 'Apache', 'OAuth', 'JWT',
     'GDPR', 'Security', 'Penetration Testing', 'Cryptography'),
)

# Process-wide, read-only. Order here is the order results are returned in.
SKILL_KEYWORDS = tuple(dict.fromkeys(skill for group in _SKILL_GROUPS for skill in group))


def _variant_pattern(variant: str) -> str:
    escaped = r'\s+'.join(re.escape(word) for word in variant.split())  # allow flexible spaces
    return r'(?<!\w)' + escaped + r'(?!\w)'


SKILL_PATTERNS = tuple(
    (skill, re.compile(_variant_pattern(skill), re.IGNORECASE)) for skill in SKILL_KEYWORDS
)

_PHRASE = r'([A-Za-z0-9.+/#&, \t-]+)'
CONTEXT_PATTERNS = tuple(re.compile(p + r'\s+' + _PHRASE, re.IGNORECASE) for p in (
    r'\bexperience\s+(?:in|with)',
    r'\bknowledge\s+of',
    r'\bproficient\s+(?:in|with)',
    r'\bskilled\s+(?:in|with)',
    r'\bexpertise\s+(?:in|with)',
    r'\bfamiliar\s+(?:with|in)',
    r'\bunderstanding\s+of',
    r'\busing',
    r'\bworked\s+with',
))
# A contextual phrase ends at a sentence stop or a purpose clause
PHRASE_END_RE = re.compile(r'\.(?:\s|$)|\s+(?:for|to|in order)\b', re.IGNORECASE)
PHRASE_SPLIT_RE = re.compile(r'\s+(?:and|or)\s+|,\s*', re.IGNORECASE)
BULLET_LINE_RE = re.compile(r'^\s*[•\-*]\s*(.+)$', re.MULTILINE)

MIN_PHRASE_LENGTH = 3
MAX_PHRASE_LENGTH = 29


def _contextual_phrases(text: str) -> List[str]:
    phrases = []
    for pattern in CONTEXT_PATTERNS:
        for m in pattern.finditer(text):
            clause = PHRASE_END_RE.split(m.group(1), maxsplit=1)[0]
            for phrase in PHRASE_SPLIT_RE.split(clause):
                phrase = phrase.strip(' \t.-')
                if MIN_PHRASE_LENGTH <= len(phrase) <= MAX_PHRASE_LENGTH:
                    phrases.append(phrase)
    return phrases


def _bullet_phrases(text: str) -> List[str]:
    phrases = []
    for m in BULLET_LINE_RE.finditer(text):
        for phrase in PHRASE_SPLIT_RE.split(m.group(1)):
            phrase = phrase.strip(' \t.-:;')
            if MIN_PHRASE_LENGTH <= len(phrase) <= MAX_PHRASE_LENGTH:
                phrases.append(phrase)
    return phrases


def _dictionary_terms_for_phrase(phrase: str) -> List[str]:
    """
    Dictionary terms containing the phrase, or contained in it.

    The phrase-inside-term direction is a plain substring test ("postgres"
    finds PostgreSQL); the term-inside-phrase direction uses the word-bounded
    pattern so one-letter terms like R do not hit every phrase.
    """
    lowered = phrase.lower()
    return [skill for skill, pattern in SKILL_PATTERNS
            if lowered in skill.lower() or pattern.search(phrase)]


def _aggressive_matches(text: str) -> Set[str]:
    found: Set[str] = set()
    for phrase in _contextual_phrases(text) + _bullet_phrases(text):
        found.update(_dictionary_terms_for_phrase(phrase))
    return found


def extract_skills(text: str, is_requirement_doc: bool = False, aggressive: bool = False) -> List[str]:
    """
    Return dictionary skills mentioned in the text, in dictionary order.

    The base pass is a word-bounded, case-insensitive scan for every term.
    The contextual pass ("experience in X", "proficient with Y", bullet
    lines) is higher recall and lower precision; it runs in aggressive mode
    and always for job requirement documents. Either way only canonical
    dictionary spellings are returned.
    """
    if not text:
        return []

    found: Dict[str, bool] = {skill: True for skill, pattern in SKILL_PATTERNS if pattern.search(text)}
    base_count = len(found)

    if aggressive or is_requirement_doc:
        for skill in _aggressive_matches(text):
            found[skill] = True

    logger.debug("Skill extraction (aggressive=%s): %d base, %d total",
                 aggressive or is_requirement_doc, base_count, len(found))
    return [skill for skill in SKILL_KEYWORDS if skill in found]
