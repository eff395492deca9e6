"""
Tests for the Flask endpoints, run against the local heuristics only.
"""

import io
import os
import shutil
import tempfile
import unittest

from app import app

JOB_TEXT = b"Job Title: Backend Engineer\nRequired Skills: Python, Django, SQL\nMinimum 3 years of experience"
RESUME_TEXT = b"Alice Smith\nalice.smith@gmail.com\nSkills: Python, Django, SQL\n5 years of experience"


class TestApp(unittest.TestCase):

    def setUp(self):
        self.folder = tempfile.mkdtemp()
        app.config.update(TESTING=True, UPLOAD_FOLDER=self.folder, EXTRACTION_ORACLE=None, BATCH_DELAY=0)
        self.client = app.test_client()

    def tearDown(self):
        shutil.rmtree(self.folder, ignore_errors=True)

    def post_match(self, jobs=None, resumes=None, **form):
        data = dict(form)
        data['job_descriptions'] = [(io.BytesIO(body), name) for name, body in (jobs or [])]
        data['resumes'] = [(io.BytesIO(body), name) for name, body in (resumes or [])]
        return self.client.post('/match', data=data, content_type='multipart/form-data')

    def test_health(self):
        response = self.client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_data(as_text=True), "OK")

    def test_missing_job_descriptions(self):
        response = self.post_match(resumes=[("alice.txt", RESUME_TEXT)])
        self.assertEqual(response.status_code, 400)
        self.assertIn("job description", response.get_json()['error'])

    def test_missing_resumes(self):
        response = self.post_match(jobs=[("backend.txt", JOB_TEXT)])
        self.assertEqual(response.status_code, 400)
        self.assertIn("resume", response.get_json()['error'])

    def test_unknown_policy(self):
        response = self.post_match(jobs=[("backend.txt", JOB_TEXT)], resumes=[("alice.txt", RESUME_TEXT)],
                                   skill_policy="pass-fail")
        self.assertEqual(response.status_code, 400)

    def test_match_and_download(self):
        response = self.post_match(
            jobs=[("backend.txt", JOB_TEXT)],
            resumes=[("alice.txt", RESUME_TEXT), ("photo.png", b"\x89PNG")],
            skill_policy="select-hold-reject",
        )
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body['skill_policy'], "select-hold-reject")
        self.assertEqual(body['experience_policy'], "at-least")
        self.assertEqual(body['job_descriptions'][0]['title'], "Backend Engineer")
        self.assertEqual([f['file'] for f in body['failed']], ["photo.png"])

        candidate = body['candidates'][0]
        self.assertEqual(candidate['candidate']['name'], "Alice Smith")
        self.assertEqual(candidate['best_match']['percentage'], 100)
        self.assertEqual(candidate['best_match']['skill_result'], "Select")
        self.assertEqual(candidate['best_match']['experience_result'], "Qualified")

        self.assertTrue(os.path.exists(os.path.join(self.folder, body['report'])))
        download = self.client.get(f"/download/{body['report']}")
        self.assertEqual(download.status_code, 200)
        self.assertTrue(download.data.startswith(b"%PDF"))
        download.close()

    def test_undecodable_upload_is_reported(self):
        response = self.post_match(jobs=[("backend.txt", JOB_TEXT)],
                                   resumes=[("alice.txt", RESUME_TEXT), ("broken.txt", b"\xff\xfe\xfa\xfb")])
        body = response.get_json()
        self.assertEqual(len(body['candidates']), 1)
        self.assertEqual([f['file'] for f in body['failed']], ["broken.txt"])

    def test_download_missing_report(self):
        response = self.client.get('/download/nope.pdf')
        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
