# Services package init
"""
FoodCycle Backend - Services Layer
==================================

What:  Store operations behind the route handlers, one collection per service.

Service Inventory:
    - FoodService:         foods (listings, single item, writes)
    - FoodRequestService:  myRequests (insert, list by user)
    - NewsletterService:   newsletterSubscribers (subscribe with duplicate check)

Services receive the database on every call and hold no state, so routes
can share the module-level instances.
"""
