"""
Business type catalog offered by the intake form, grouped by category.
"""

BUSINESS_TYPES = {
    'Healthcare & Medical': [
        'Dentist', 'Orthodontist', 'Chiropractor', 'Physical Therapist', 'Optometrist',
        'Veterinarian', 'Medical Clinic', 'Mental Health Counselor', 'Dermatologist', 'Pediatrician',
    ],
    'Legal Services': [
        'Family Lawyer', 'Criminal Defense Attorney', 'Estate Planning Attorney',
        'Personal Injury Lawyer', 'Business/Corporate Lawyer', 'Immigration Attorney',
        'Bankruptcy Attorney', 'Real Estate Attorney',
    ],
    'Home Services': [
        'Plumber', 'Electrician', 'HVAC Technician', 'Roofing Contractor', 'General Contractor',
        'Landscaper', 'Pest Control', 'House Cleaning Service', 'Handyman', 'Painter',
    ],
    'Professional Services': [
        'Accountant/CPA', 'Financial Advisor', 'Insurance Agent', 'Real Estate Agent',
        'Mortgage Broker', 'Business Consultant', 'Marketing Agency', 'Web Design Agency',
        'IT Services', 'HR Consultant',
    ],
    'Automotive': [
        'Auto Repair Shop', 'Auto Detailing', 'Tire Shop', 'Auto Body Shop',
        'Car Dealership', 'Motorcycle Repair',
    ],
    'Beauty & Wellness': [
        'Hair Salon', 'Nail Salon', 'Spa/Massage Therapy', 'Barber Shop',
        'Makeup Artist', 'Esthetician', 'Tattoo Studio',
    ],
    'Fitness & Recreation': [
        'Gym/Fitness Center', 'Personal Trainer', 'Yoga Studio', 'Martial Arts School',
        'Dance Studio', 'Sports Coach/Training',
    ],
    'Education & Childcare': [
        'Tutoring Service', 'Daycare Center', 'Preschool', 'Music Teacher',
        'Art Classes', 'Driving School',
    ],
    'Food & Hospitality': [
        'Restaurant', 'Catering Service', 'Bakery', 'Food Truck', 'Coffee Shop', 'Bar/Nightclub',
    ],
    'Retail & E-commerce': [
        'Clothing Store', 'Jewelry Store', 'Pet Store', 'Furniture Store',
        'Electronics Store', 'Online Retailer',
    ],
    'Other Services': [
        'Photography/Videography', 'Event Planning', 'Travel Agency', 'Funeral Home',
        'Moving Company', 'Storage Facility',
    ],
}
