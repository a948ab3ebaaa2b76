"""HTML bodies of the built-in document templates."""

CREDIT_AUTH_FORM_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Credit Report Authorization Form</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
        .header { text-align: center; margin-bottom: 30px; }
        .form-section { margin: 20px 0; }
        .signature-line { border-bottom: 1px solid #000; width: 300px; display: inline-block; margin: 10px; }
        .checkbox { margin: 5px 0; }
    </style>
</head>
<body>
    <div class="header">
        <h1>CONSUMER CREDIT REPORT AUTHORIZATION FORM</h1>
        <h3>LoanFlow Pro Commercial Lending</h3>
    </div>

    <div class="form-section">
        <h3>BORROWER INFORMATION</h3>
        <p><strong>Full Name:</strong> {{borrowerName}}</p>
        <p><strong>Social Security Number:</strong> {{ssn}}</p>
        <p><strong>Date of Birth:</strong> {{dateOfBirth}}</p>
        <p><strong>Current Address:</strong> {{address}}</p>
        <p><strong>Phone Number:</strong> {{phone}}</p>
        <p><strong>Email Address:</strong> {{email}}</p>
    </div>

    <div class="form-section">
        <h3>AUTHORIZATION</h3>
        <p>I hereby authorize LoanFlow Pro and its designated agents to obtain my consumer credit report from one or more consumer credit reporting agencies. I understand that this authorization will result in a "hard" credit inquiry that may affect my credit score.</p>
        <div class="checkbox"><input type="checkbox" required> I authorize the use of my credit report for loan underwriting purposes</div>
        <div class="checkbox"><input type="checkbox" required> I understand this will result in a hard credit inquiry</div>
        <div class="checkbox"><input type="checkbox" required> I certify that the information provided is accurate and complete</div>
    </div>

    <div class="form-section">
        <h3>PERMISSIBLE PURPOSE</h3>
        <p>This credit report is being obtained for the purpose of evaluating my application for commercial real estate financing in accordance with the Fair Credit Reporting Act.</p>
    </div>

    <div class="form-section" style="margin-top: 50px;">
        <p><strong>Borrower Signature:</strong> <span class="signature-line"></span> <strong>Date:</strong> <span class="signature-line"></span></p>
        <p style="font-size: 12px; margin-top: 20px;">By signing this form, you acknowledge that you have read and understand this authorization and consent to the credit check described above.</p>
    </div>

    <div class="form-section" style="margin-top: 30px; font-size: 10px; color: #666;">
        <p><strong>Date Generated:</strong> {{currentDate}}</p>
        <p><strong>LoanFlow Pro</strong> | Commercial Lending Division</p>
    </div>
</body>
</html>
"""

BROKER_FEE_AGREEMENT_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Broker Fee Agreement</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
        .header { text-align: center; margin-bottom: 30px; }
        .section { margin: 20px 0; }
        .signature-section { margin-top: 50px; }
        .signature-line { border-bottom: 1px solid #000; width: 300px; display: inline-block; margin: 10px; }
        .terms { background: #f9f9f9; padding: 15px; border-left: 4px solid #007cba; }
    </style>
</head>
<body>
    <div class="header">
        <h1>BROKER FEE AGREEMENT</h1>
        <h3>LoanFlow Pro Commercial Lending</h3>
    </div>

    <div class="section">
        <h3>BORROWER INFORMATION</h3>
        <p><strong>Borrower Name:</strong> {{borrowerName}}</p>
        <p><strong>Property Address:</strong> {{propertyAddress}}</p>
        <p><strong>Loan Amount:</strong> ${{loanAmount}}</p>
        <p><strong>Agreement Date:</strong> {{currentDate}}</p>
    </div>

    <div class="section">
        <h3>BROKER SERVICES</h3>
        <p>LoanFlow Pro agrees to provide the following services:</p>
        <ul>
            <li>Source and present suitable loan programs</li>
            <li>Assist with loan application preparation</li>
            <li>Coordinate with lenders throughout the process</li>
            <li>Provide rate and term negotiations</li>
            <li>Facilitate loan closing</li>
        </ul>
    </div>

    <div class="section">
        <h3>COMPENSATION</h3>
        <div class="terms">
            <p><strong>Broker Fee:</strong> {{feePercentage}}% of loan amount = ${{feeAmount}}</p>
            <p><strong>Payment Terms:</strong> Fee due at closing from loan proceeds</p>
            <p><strong>Exclusive Period:</strong> 120 days from signing</p>
        </div>
    </div>

    <div class="section">
        <h3>BORROWER COMMITMENT</h3>
        <p>By signing this agreement, the borrower agrees to:</p>
        <ul>
            <li>Work exclusively with LoanFlow Pro for the specified loan</li>
            <li>Not seek financing for this property through other brokers during the exclusive period</li>
            <li>Pay the agreed-upon broker fee at closing</li>
            <li>Provide all requested documentation in a timely manner</li>
        </ul>
    </div>

    <div class="section">
        <h3>CANCELLATION</h3>
        <p>This agreement may be cancelled by either party with 7 days written notice. If borrower cancels after lender approval, full broker fee remains due.</p>
    </div>

    <div class="signature-section">
        <p><strong>Borrower Signature:</strong> <span class="signature-line"></span> <strong>Date:</strong> <span class="signature-line"></span></p>
        <p style="margin-top: 30px;"><strong>Broker Signature:</strong> <span class="signature-line"></span> <strong>Date:</strong> <span class="signature-line"></span></p>
    </div>
</body>
</html>
"""

DSCR_LOAN_GUIDE_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>DSCR Loan Guide</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
        .header { text-align: center; margin-bottom: 30px; background: #007cba; color: white; padding: 20px; }
        .section { margin: 25px 0; }
        .highlight { background: #e8f4fd; padding: 15px; border-left: 4px solid #007cba; }
        .requirements { background: #f0f8f0; padding: 15px; border: 1px solid #28a745; }
        table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        th, td { border: 1px solid #ddd; padding: 12px; text-align: left; }
        th { background: #f2f2f2; }
    </style>
</head>
<body>
    <div class="header">
        <h1>DEBT SERVICE COVERAGE RATIO (DSCR) LOAN GUIDE</h1>
        <p>Prepared for {{borrowerName}}</p>
    </div>

    <div class="section">
        <h2>What is a DSCR Loan?</h2>
        <p>A DSCR loan is investment property financing where qualification is based on the property's rental income rather than the borrower's personal income.</p>
        <div class="highlight">
            <h3>DSCR Formula</h3>
            <p><strong>DSCR = Net Operating Income (NOI) / Total Debt Service</strong></p>
            <p>A DSCR of 1.25 means the property generates 25% more income than needed to cover the mortgage payment.</p>
        </div>
    </div>

    <div class="section">
        <h2>DSCR Loan Requirements</h2>
        <div class="requirements">
            <ul>
                <li><strong>Minimum DSCR:</strong> 1.00 (some lenders require 1.25)</li>
                <li><strong>Credit Score:</strong> 680+ (720+ for best rates)</li>
                <li><strong>Down Payment:</strong> 20-25% minimum</li>
                <li><strong>Cash Reserves:</strong> 2-6 months PITIA</li>
                <li><strong>Property Type:</strong> 1-4 unit residential, some commercial</li>
                <li><strong>Loan Limits:</strong> Up to $5M (varies by lender)</li>
            </ul>
        </div>
    </div>

    <div class="section">
        <h2>Current DSCR Rates &amp; Terms</h2>
        <table>
            <tr><th>DSCR Ratio</th><th>Rate Range</th><th>Max LTV</th><th>Term Options</th></tr>
            <tr><td>1.25+</td><td>7.25% - 8.50%</td><td>80%</td><td>30 Year Fixed, 5/1 ARM</td></tr>
            <tr><td>1.10 - 1.24</td><td>7.50% - 8.75%</td><td>75%</td><td>30 Year Fixed, 7/1 ARM</td></tr>
            <tr><td>1.00 - 1.09</td><td>7.75% - 9.00%</td><td>70%</td><td>30 Year Fixed</td></tr>
        </table>
    </div>

    <div class="section">
        <h2>Required Documents</h2>
        <ul>
            <li>Signed Purchase Agreement or Property Deed</li>
            <li>Current Rent Roll (if occupied)</li>
            <li>Lease Agreements (if applicable)</li>
            <li>Property Insurance Quote</li>
            <li>Property Tax Bill</li>
            <li>Bank Statements (2 months)</li>
        </ul>
    </div>

    <div class="section">
        <h2>DSCR Calculation Example</h2>
        <div class="highlight">
            <p><strong>Annual Rental Income:</strong> $42,000</p>
            <p><strong>Operating Expenses (25%):</strong> -$10,500</p>
            <p><strong>Net Operating Income:</strong> $31,500</p>
            <p><strong>Annual Debt Service:</strong> $24,000</p>
            <p><strong>DSCR:</strong> $31,500 / $24,000 = 1.31</p>
        </div>
    </div>

    <div style="margin-top: 40px; text-align: center; border-top: 2px solid #007cba; padding-top: 20px;">
        <p><strong>LoanFlow Pro DSCR Lending</strong> | Equal Housing Lender</p>
        <p>Questions, {{borrowerName}}? Reply to your loan officer and we will walk you through the next steps.</p>
    </div>
</body>
</html>
"""

PERSONAL_FINANCIAL_STATEMENT_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Personal Financial Statement</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 30px; line-height: 1.4; }
        .header { text-align: center; margin-bottom: 30px; }
        table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        th, td { border: 1px solid #000; padding: 8px; text-align: left; }
        .section-header { background: #e0e0e0; font-weight: bold; }
        .total-row { background: #f9f9f9; font-weight: bold; }
        .signature-line { border-bottom: 1px solid #000; width: 250px; display: inline-block; }
    </style>
</head>
<body>
    <div class="header">
        <h1>PERSONAL FINANCIAL STATEMENT</h1>
        <p><strong>As of:</strong> {{currentDate}}</p>
    </div>

    <table>
        <tr>
            <td><strong>Name:</strong> {{borrowerName}}</td>
            <td><strong>Spouse/Co-Borrower:</strong> {{spouseName}}</td>
        </tr>
        <tr>
            <td><strong>Address:</strong> _______________________</td>
            <td><strong>Phone:</strong> _______________________</td>
        </tr>
    </table>

    <h2>ASSETS</h2>
    <table>
        <tr class="section-header"><td>LIQUID ASSETS</td><td>AMOUNT</td></tr>
        <tr><td>Cash on Hand</td><td>$_________</td></tr>
        <tr><td>Checking Accounts</td><td>$_________</td></tr>
        <tr><td>Savings Accounts</td><td>$_________</td></tr>
        <tr><td>Money Market Accounts</td><td>$_________</td></tr>
        <tr class="total-row"><td>TOTAL LIQUID ASSETS</td><td>$_________</td></tr>
        <tr class="section-header"><td>INVESTMENT ASSETS</td><td>AMOUNT</td></tr>
        <tr><td>Stocks/Bonds</td><td>$_________</td></tr>
        <tr><td>401(k)/IRA</td><td>$_________</td></tr>
        <tr><td>Real Estate Owned</td><td>$_________</td></tr>
        <tr class="total-row"><td>TOTAL ASSETS</td><td>$_________</td></tr>
    </table>

    <h2>LIABILITIES</h2>
    <table>
        <tr><td>Mortgages on Real Estate</td><td>$_________</td></tr>
        <tr><td>Installment Loans</td><td>$_________</td></tr>
        <tr><td>Credit Cards</td><td>$_________</td></tr>
        <tr class="total-row"><td>TOTAL LIABILITIES</td><td>$_________</td></tr>
        <tr class="total-row"><td>NET WORTH</td><td>$_________</td></tr>
    </table>

    <div style="margin-top: 40px;">
        <p>I certify that the above information is true and complete to the best of my knowledge.</p>
        <p><strong>Signature:</strong> <span class="signature-line"></span> <strong>Date:</strong> <span class="signature-line"></span></p>
    </div>
</body>
</html>
"""

RENT_ROLL_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Rent Roll</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 30px; line-height: 1.4; }
        .header { text-align: center; margin-bottom: 30px; }
        table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        th, td { border: 1px solid #000; padding: 8px; text-align: center; font-size: 12px; }
        th { background: #f0f0f0; font-weight: bold; }
        .total-row { background: #e8f5e8; font-weight: bold; }
        .signature-line { border-bottom: 1px solid #000; width: 250px; display: inline-block; }
    </style>
</head>
<body>
    <div class="header">
        <h1>RENT ROLL</h1>
        <p><strong>Property Address:</strong> {{propertyAddress}}</p>
        <p><strong>Owner:</strong> {{borrowerName}}</p>
        <p><strong>Date:</strong> {{currentDate}}</p>
    </div>

    <p><strong>Total Units:</strong> _______________ <strong>Occupied Units:</strong> _______________</p>

    <table>
        <tr><th>Unit #</th><th>Tenant Name</th><th>Lease Start</th><th>Lease End</th><th>Monthly Rent</th><th>Security Deposit</th><th>Status</th></tr>
        <tr><td>101</td><td>_____________</td><td>_________</td><td>_________</td><td>$_______</td><td>$_______</td><td>________</td></tr>
        <tr><td>102</td><td>_____________</td><td>_________</td><td>_________</td><td>$_______</td><td>$_______</td><td>________</td></tr>
        <tr><td>201</td><td>_____________</td><td>_________</td><td>_________</td><td>$_______</td><td>$_______</td><td>________</td></tr>
        <tr><td>202</td><td>_____________</td><td>_________</td><td>_________</td><td>$_______</td><td>$_______</td><td>________</td></tr>
        <tr class="total-row"><td colspan="4">TOTAL MONTHLY RENT</td><td>$_______</td><td>$_______</td><td></td></tr>
    </table>

    <div style="margin-top: 40px;">
        <p>I certify that this rent roll is true and correct as of the date above.</p>
        <p><strong>Property Owner Signature:</strong> <span class="signature-line"></span></p>
    </div>
</body>
</html>
"""

VOM_FORM_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Verification of Mortgage</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 30px; line-height: 1.5; }
        .header { text-align: center; margin-bottom: 30px; border-bottom: 2px solid #000; padding-bottom: 20px; }
        .section { margin: 20px 0; }
        table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        th, td { border: 1px solid #000; padding: 10px; text-align: left; }
        .form-field { border-bottom: 1px solid #000; min-width: 200px; display: inline-block; margin: 5px; }
    </style>
</head>
<body>
    <div class="header">
        <h1>VERIFICATION OF MORTGAGE (VOM)</h1>
        <p><strong>CONFIDENTIAL INFORMATION</strong></p>
    </div>

    <div class="section">
        <h3>TO BE COMPLETED BY BORROWER</h3>
        <p><strong>Borrower Name:</strong> {{borrowerName}}</p>
        <p><strong>Property Address:</strong> {{propertyAddress}}</p>
        <p><strong>Loan Number:</strong> <span class="form-field"></span></p>
        <p><strong>Date:</strong> {{currentDate}}</p>
        <p>I hereby authorize and request that you provide the mortgage information requested below to LoanFlow Pro for the purpose of verifying my mortgage account information in connection with my loan application.</p>
    </div>

    <div class="section">
        <h3>TO BE COMPLETED BY LENDER/SERVICER</h3>
        <p><strong>Lender/Servicer Name:</strong> {{lenderName}}</p>
        <p><strong>Contact Person:</strong> <span class="form-field"></span></p>
        <p><strong>Phone Number:</strong> <span class="form-field"></span></p>
    </div>

    <table>
        <tr><th colspan="2">MORTGAGE INFORMATION</th></tr>
        <tr><td>Original Loan Amount</td><td>$<span class="form-field"></span></td></tr>
        <tr><td>Current Principal Balance</td><td>$<span class="form-field"></span></td></tr>
        <tr><td>Interest Rate</td><td><span class="form-field"></span>%</td></tr>
        <tr><td>Total Monthly Payment</td><td>$<span class="form-field"></span></td></tr>
        <tr><td>Maturity Date</td><td><span class="form-field"></span></td></tr>
    </table>

    <table>
        <tr><th colspan="2">PAYMENT HISTORY (Last 12 Months)</th></tr>
        <tr><td>Current Status</td><td>&#9633; Current &#9633; 30 Days Late &#9633; 60 Days Late &#9633; 90+ Days Late</td></tr>
        <tr><td>Number of Late Payments (30+ days)</td><td><span class="form-field"></span></td></tr>
    </table>

    <div style="margin-top: 30px; font-size: 12px; text-align: center; border-top: 1px solid #000; padding-top: 15px;">
        <p><strong>RETURN TO:</strong> LoanFlow Pro, Commercial Lending Department</p>
    </div>
</body>
</html>
"""
