from django.test import SimpleTestCase


class PageTests(SimpleTestCase):

    def test_home(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'BUBURUEBI BRIGHTERLIFE HEALTH CARE SERVICE')
        self.assertContains(response, '/appointments/?service=laboratory')
        self.assertContains(response, 'Sarah Johnson')

    def test_about(self):
        response = self.client.get('/about/')
        self.assertContains(response, 'Patient-Centric Care')

    def test_footer_carries_clinic_contacts(self):
        response = self.client.get('/about/')
        self.assertContains(response, 'https://wa.me/2349076167977')

    def test_health(self):
        response = self.client.get('/health/')
        self.assertEqual(response.json(), {'status': 'ok'})

    def test_unknown_page_uses_custom_404(self):
        response = self.client.get('/does-not-exist/')
        self.assertEqual(response.status_code, 404)
        self.assertContains(response, 'Page not found', status_code=404)
