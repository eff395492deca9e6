import os
import uuid
import asyncio
import logging
from flask import Flask, request, jsonify, send_file
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

import config
from document_parser import process_batch
from gemini_parser import parse_with_gemini
from job_matcher import ExperiencePolicy, SkillBandPolicy, rank_candidates
from models import DocumentKind
from report import build_pdf_report

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = config.SECRET_KEY
app.config['UPLOAD_FOLDER'] = config.UPLOAD_FOLDER
app.config['MAX_CONTENT_LENGTH'] = config.MAX_CONTENT_LENGTH
app.config['EXTRACTION_ORACLE'] = parse_with_gemini
app.config['BATCH_DELAY'] = config.BATCH_DELAY_SECONDS


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in config.ALLOWED_EXTENSIONS


def _error(message, status=400):
    return jsonify({'error': message}), status


def _collect_uploads(field, failed):
    """(secure name, bytes) for every supported upload in ``field``; the rest go to ``failed``."""
    uploads = []
    # Some browsers may produce a single empty FileStorage; treat empty names as no files
    for f in request.files.getlist(field):
        fname = getattr(f, "filename", "") if f else ""
        if not fname:
            continue
        if allowed_file(fname):
            filename = secure_filename(fname)
            # non-ASCII names can lose their extension entirely
            uploads.append((filename if allowed_file(filename) else fname, f.read()))
        else:
            failed.append({'file': fname, 'error': 'Unsupported file type (supported: .pdf, .txt, .docx)'})
    return uploads


def _policy(enum_cls, field, default):
    value = request.form.get(field, '').strip()
    return enum_cls(value) if value else default


async def _parse_uploads(job_files, resume_files, on_error):
    oracle = app.config['EXTRACTION_ORACLE']
    delay = app.config['BATCH_DELAY']
    jobs = await process_batch(job_files, DocumentKind.JOB_REQUIREMENT, oracle=oracle, delay=delay, on_error=on_error)
    resumes = await process_batch(resume_files, DocumentKind.RESUME, oracle=oracle, delay=delay, on_error=on_error)
    return jobs, resumes


@app.route('/match', methods=['POST'])
def match():
    try:
        skill_policy = _policy(SkillBandPolicy, 'skill_policy', SkillBandPolicy.QUALIFIED_TIERED)
        experience_policy = _policy(ExperiencePolicy, 'experience_policy', ExperiencePolicy.AT_LEAST)
    except ValueError as e:
        return _error(f"Unknown policy: {e}")

    failed = []
    job_files = _collect_uploads('job_descriptions', failed)
    resume_files = _collect_uploads('resumes', failed)
    if not job_files:
        return _error("Please upload at least one job description (.pdf, .txt, .docx).")
    if not resume_files:
        return _error("Please upload at least one resume file (.pdf, .txt, .docx).")

    def on_error(name, exc):
        failed.append({'file': name, 'error': str(exc)})

    jobs, resumes = asyncio.run(_parse_uploads(job_files, resume_files, on_error))
    ranked = rank_candidates(resumes, jobs, skill_policy, experience_policy)

    # PDF report path
    pdf_filename = f"ranked_results_{uuid.uuid4().hex[:8]}.pdf"
    pdf_path = os.path.join(app.config['UPLOAD_FOLDER'], pdf_filename)
    try:
        build_pdf_report(ranked, pdf_path)
    except Exception:
        logger.exception("Failed to generate PDF report %s", pdf_path)
        pdf_filename = None

    return jsonify({
        'skill_policy': skill_policy.value,
        'experience_policy': experience_policy.value,
        'job_descriptions': [j.to_dict() for j in jobs],
        'candidates': [r.to_dict() for r in ranked],
        'failed': failed,
        'report': pdf_filename,
    })


@app.route('/download/<report_name>')
def download_report(report_name):
    path = os.path.join(app.config['UPLOAD_FOLDER'], secure_filename(report_name))
    if os.path.exists(path):
        return send_file(path, as_attachment=True)
    return _error("Report not found.", 404)


@app.errorhandler(RequestEntityTooLarge)
def too_large(e):
    return _error("Upload too large (limit 50MB).", 413)


@app.route('/health')
def health():
    return "OK", 200


if __name__ == '__main__':
    config.configure_logging()
    app.run(debug=False, port=5000)
