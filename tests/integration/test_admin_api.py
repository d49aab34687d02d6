"""Integration tests for the admin endpoints."""

from marketplace.order.order import Order
from marketplace.vendor.vendor import Vendor, VendorStatus
from protean import current_domain
from support import as_customer, seed_vendor


class TestAdminAccess:
    def test_customer_is_forbidden(self, client):
        response = client.post("/admin/orders/resync-statuses", headers=as_customer())
        assert response.status_code == 403

    def test_anonymous_is_unauthorized(self, client):
        assert client.post("/admin/orders/resync-statuses").status_code == 401


class TestResyncEndpoint:
    def test_repairs_drifted_order(self, client, admin_headers, two_vendor_order):
        repo = current_domain.repository_for(Order)
        order = repo.get(two_vendor_order.id)
        order.status = "SHIPPED"
        repo.add(order)

        response = client.post("/admin/orders/resync-statuses", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"synced": 1}
        assert repo.get(two_vendor_order.id).status == "PENDING"

    def test_nothing_to_repair(self, client, admin_headers, two_vendor_order):
        response = client.post("/admin/orders/resync-statuses", headers=admin_headers)
        assert response.json() == {"synced": 0}


class TestVendorModerationEndpoints:
    def test_approve_pending_vendor(self, client, admin_headers):
        vendor = seed_vendor(user_id="vendor-new", active=False)

        response = client.put(f"/admin/vendors/{vendor.id}/approve", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"status": "approved"}
        vendor = current_domain.repository_for(Vendor).get(vendor.id)
        assert vendor.status == VendorStatus.ACTIVE.value
        assert vendor.approved_at is not None

    def test_reject_pending_vendor(self, client, admin_headers):
        vendor = seed_vendor(user_id="vendor-new", active=False)

        response = client.put(
            f"/admin/vendors/{vendor.id}/reject",
            json={"reason": "Incomplete documents"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert current_domain.repository_for(Vendor).get(vendor.id).status == VendorStatus.REJECTED.value

    def test_suspend_active_vendor(self, client, admin_headers, vendor_a):
        response = client.put(f"/admin/vendors/{vendor_a.id}/suspend", json={}, headers=admin_headers)

        assert response.status_code == 200
        assert current_domain.repository_for(Vendor).get(vendor_a.id).status == VendorStatus.SUSPENDED.value

    def test_unknown_vendor(self, client, admin_headers):
        response = client.put("/admin/vendors/does-not-exist/approve", headers=admin_headers)
        assert response.status_code == 404
