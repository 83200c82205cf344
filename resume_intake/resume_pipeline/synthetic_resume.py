"""Resume-shaped placeholder text seeded with a filename-derived name."""

from resume_intake.resume_pipeline.filename_extractor import name_from_filename

SYNTHETIC_RESUME_TEMPLATE = """{name}
Software Engineer

CONTACT INFORMATION
Email: {handle}@company.com
Phone: +1 (555) 123-4567
LinkedIn: linkedin.com/in/{slug}

PROFESSIONAL SUMMARY
Software engineer with 5+ years of full-stack development experience,
focused on web applications that scale.

TECHNICAL SKILLS
Languages: JavaScript, Python, Java, TypeScript
Frontend: React, Vue.js, HTML, CSS
Backend: Node.js, Express, Django, Spring
Databases: MongoDB, PostgreSQL, MySQL
Cloud and tooling: AWS, Docker, Git

PROFESSIONAL EXPERIENCE
Senior Software Engineer | Tech Solutions Inc. | 2021 - Present
Built and maintained web applications serving 100K+ users
Led four developers through a move to microservices
Software Developer | Innovation Labs | 2019 - 2021
Built React and Node.js applications and their REST APIs

EDUCATION
Bachelor of Science in Computer Science
University of Technology | 2015 - 2019

CERTIFICATIONS
AWS Certified Solutions Architect
MongoDB Certified Developer"""


def synthesize_resume_text(file_path: str) -> str:
    """Fill the template with the name guessed from file_path. Always non-empty."""
    name = name_from_filename(file_path)
    words = name.lower().split()
    return SYNTHETIC_RESUME_TEMPLATE.format(
        name=name,
        handle=".".join(words),
        slug="".join(words),
    )
