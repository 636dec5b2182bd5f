"""
Budget ledger URL routing.
"""

from django.urls import path

from budget_api import views


urlpatterns = [
    path("api/summary", views.summary_view),
    path("api/funds", views.funds_list_view),
    path("api/agencies", views.agencies_list_view),
    path("api/programs", views.programs_list_view),
    path("api/allocations", views.allocations_list_view),
    path("api/disbursements", views.disbursements_list_view),
    path("api/fund", views.fund_create_view),
    path("api/agency", views.agency_create_view),
    path("api/program", views.program_create_view),
    path("api/allocation", views.allocation_create_view),
    path("api/disbursement", views.disbursement_create_view),
    path("test", views.connectivity_view),
]
